"""Wheel layout: collision-free symbol placement and derived geometry."""

from .collision import Circle, LayoutResult, LocatedPoint, resolve
from .wheel import (
    SIGN_DETAILS,
    PointerLines,
    Segment,
    SignSegment,
    TextAnchor,
    WheelDimensions,
    chart_shift,
    cusp_segments,
    describe_point,
    description_anchors,
    house_label_angles,
    pointer_lines,
    ruler_ticks,
    sign_segments,
)

__all__ = [
    "Circle",
    "LayoutResult",
    "LocatedPoint",
    "PointerLines",
    "SIGN_DETAILS",
    "Segment",
    "SignSegment",
    "TextAnchor",
    "WheelDimensions",
    "chart_shift",
    "cusp_segments",
    "describe_point",
    "description_anchors",
    "house_label_angles",
    "pointer_lines",
    "resolve",
    "ruler_ticks",
    "sign_segments",
]
