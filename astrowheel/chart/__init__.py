"""Chart-level facades built on the layout and aspect engines."""

from .radix import (
    AspectLine,
    AxisMarker,
    RadixChart,
    RadixLayout,
    validate_chart_data,
)

__all__ = [
    "AspectLine",
    "AxisMarker",
    "RadixChart",
    "RadixLayout",
    "validate_chart_data",
]
