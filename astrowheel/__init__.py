"""astrowheel: radix chart layout and aspect detection."""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version as _get_version

from .aspects import (
    DEFAULT_CATALOG,
    FULL_CATALOG,
    Aspect,
    AspectCatalog,
    AspectMatch,
    detect,
    transit_aspects,
)
from .chart import RadixChart, RadixLayout
from .core import (
    DegenerateGeometryWarning,
    Point,
    PointSet,
    ValidationError,
    angular_separation,
    normalize_degrees,
    signed_delta,
)
from .viz import Circle, LayoutResult, LocatedPoint, resolve

LOG = logging.getLogger(__name__)

try:
    __version__ = _get_version("astrowheel")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0"


def get_version() -> str:
    """Return the resolved astrowheel package version."""

    return __version__


__all__ = [
    "Aspect",
    "AspectCatalog",
    "AspectMatch",
    "Circle",
    "DEFAULT_CATALOG",
    "DegenerateGeometryWarning",
    "FULL_CATALOG",
    "LayoutResult",
    "LocatedPoint",
    "Point",
    "PointSet",
    "RadixChart",
    "RadixLayout",
    "ValidationError",
    "__version__",
    "angular_separation",
    "detect",
    "get_version",
    "normalize_degrees",
    "resolve",
    "signed_delta",
    "transit_aspects",
]
