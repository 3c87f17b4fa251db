"""Essential dignity tables used for point descriptions on the wheel."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from .angles import angular_separation, normalize_degrees

__all__ = [
    "DEFAULT_EXACT_EXALTATIONS",
    "DETRIMENT",
    "EXACT_EXALTATION",
    "EXALTATION",
    "FALL",
    "RULERSHIP",
    "SIGNS",
    "ExactExaltation",
    "dignities",
    "sign_of",
]

RULERSHIP = "r"
DETRIMENT = "d"
EXALTATION = "e"
EXACT_EXALTATION = "E"
FALL = "f"

SIGNS: Tuple[str, ...] = (
    "aries",
    "taurus",
    "gemini",
    "cancer",
    "leo",
    "virgo",
    "libra",
    "scorpio",
    "sagittarius",
    "capricorn",
    "aquarius",
    "pisces",
)

# body -> (rulership, detriment, exaltation, fall)
_TABLE: Dict[str, Tuple[Tuple[str, ...], ...]] = {
    "sun": (("leo",), ("aquarius",), ("aries",), ("libra",)),
    "moon": (("cancer",), ("capricorn",), ("taurus",), ("scorpio",)),
    "mercury": (("gemini", "virgo"), ("sagittarius", "pisces"), ("virgo",), ("pisces",)),
    "venus": (("taurus", "libra"), ("aries", "scorpio"), ("pisces",), ("virgo",)),
    "mars": (("aries", "scorpio"), ("taurus", "libra"), ("capricorn",), ("cancer",)),
    "jupiter": (("sagittarius", "pisces"), ("gemini", "virgo"), ("cancer",), ("capricorn",)),
    "saturn": (("capricorn", "aquarius"), ("cancer", "leo"), ("libra",), ("aries",)),
    "uranus": (("aquarius",), ("leo",), ("scorpio",), ("taurus",)),
    "neptune": (("pisces",), ("virgo",), ("leo", "sagittarius"), ("aquarius", "gemini")),
    "pluto": (("scorpio",), ("taurus",), ("aries",), ("libra",)),
}

_CODES = (RULERSHIP, DETRIMENT, EXALTATION, FALL)


@dataclass(frozen=True, slots=True)
class ExactExaltation:
    """Degree of exact exaltation for a body and the orb around it."""

    name: str
    position: float
    orb: float = 2.0


DEFAULT_EXACT_EXALTATIONS: Tuple[ExactExaltation, ...] = (
    ExactExaltation("Sun", 19.0),
    ExactExaltation("Moon", 33.0),
    ExactExaltation("Mercury", 155.0),
    ExactExaltation("Venus", 357.0),
    ExactExaltation("Mars", 298.0),
    ExactExaltation("Jupiter", 105.0),
    ExactExaltation("Saturn", 201.0),
    ExactExaltation("NNode", 63.0),
    ExactExaltation("SNode", 243.0),
)


def sign_of(angle: float) -> str:
    """Return the zodiac sign holding the longitude ``angle``."""

    return SIGNS[int(normalize_degrees(angle) // 30.0) % 12]


def dignities(
    name: str,
    angle: float,
    exact_exaltations: Iterable[ExactExaltation] = DEFAULT_EXACT_EXALTATIONS,
) -> List[str]:
    """Return dignity codes for body ``name`` at longitude ``angle``.

    Codes are ``r`` (rulership), ``d`` (detriment), ``e`` (exaltation),
    ``f`` (fall) and ``E`` when the body sits within the orb of its exact
    exaltation degree. Unknown bodies have no dignities.
    """

    sign = sign_of(angle)
    result: List[str] = []
    rows: Sequence[Tuple[str, ...]] = _TABLE.get(name.strip().lower(), ())
    for code, signs in zip(_CODES, rows):
        if sign in signs:
            result.append(code)
    for exact in exact_exaltations:
        if exact.name.lower() != name.strip().lower():
            continue
        if angular_separation(angle, exact.position) <= exact.orb:
            result.append(EXACT_EXALTATION)
            break
    return result
