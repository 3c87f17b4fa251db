"""Aspect catalog and detection."""

from .catalog import (
    DEFAULT_CATALOG,
    FULL_CATALOG,
    MAJOR_ASPECTS,
    MINOR_ASPECTS,
    Aspect,
    AspectCatalog,
)
from .detector import AspectMatch, detect, match_pair, precision, transit_aspects

__all__ = [
    "Aspect",
    "AspectCatalog",
    "AspectMatch",
    "DEFAULT_CATALOG",
    "FULL_CATALOG",
    "MAJOR_ASPECTS",
    "MINOR_ASPECTS",
    "detect",
    "match_pair",
    "precision",
    "transit_aspects",
]
