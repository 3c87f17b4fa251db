"""Aspect definitions and the precedence ordered catalog used for matching."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from astrowheel.core.errors import ValidationError

__all__ = [
    "Aspect",
    "AspectCatalog",
    "DEFAULT_CATALOG",
    "FULL_CATALOG",
    "MAJOR_ASPECTS",
    "MINOR_ASPECTS",
]

EPS = 1e-9


@dataclass(frozen=True, slots=True)
class Aspect:
    """A named angular relationship and the orb within which it holds."""

    id: str
    name: str
    angle: float
    orb: float
    color: str = "#9e9e9e"
    rank: int = 0
    major: bool = True

    def delta(self, separation: float) -> float:
        """Absolute distance between ``separation`` and the exact aspect."""

        return abs(float(separation) - self.angle)

    def admits(self, separation: float) -> bool:
        return self.delta(separation) <= self.orb + EPS


MAJOR_ASPECTS: Tuple[Aspect, ...] = (
    Aspect("conjunction", "Conjunction", 0.0, 8.0, "#ffab91", rank=0),
    Aspect("opposition", "Opposition", 180.0, 8.0, "#90caf9", rank=1),
    Aspect("square", "Square", 90.0, 7.0, "#ef9a9a", rank=2),
    Aspect("trine", "Trine", 120.0, 7.0, "#a5d6a7", rank=3),
    Aspect("sextile", "Sextile", 60.0, 5.0, "#ce93d8", rank=4),
)

MINOR_ASPECTS: Tuple[Aspect, ...] = (
    Aspect("quincunx", "Quincunx", 150.0, 3.0, "#bcaaa4", rank=5, major=False),
    Aspect("semisextile", "Semisextile", 30.0, 2.0, "#b0bec5", rank=6, major=False),
    Aspect("semisquare", "Semisquare", 45.0, 2.0, "#ffcc80", rank=7, major=False),
    Aspect("sesquisquare", "Sesquisquare", 135.0, 2.0, "#ffe082", rank=8, major=False),
    Aspect("quintile", "Quintile", 72.0, 2.0, "#80cbc4", rank=9, major=False),
    Aspect("biquintile", "Biquintile", 144.0, 2.0, "#80deea", rank=10, major=False),
)


class AspectCatalog:
    """Immutable table of aspects iterated in precedence order.

    Lookups go by separation, never by name: :meth:`best_match` picks the
    entry closest to the measured separation and breaks exact ties by
    ``rank``.
    """

    __slots__ = ("_aspects", "_by_id")

    def __init__(self, aspects: Iterable[Aspect]) -> None:
        items = tuple(aspects)
        errors: List[str] = []
        seen: Dict[str, Aspect] = {}
        for aspect in items:
            if aspect.id in seen:
                errors.append(f"duplicate aspect id '{aspect.id}'")
            seen[aspect.id] = aspect
            if not math.isfinite(aspect.angle) or not 0.0 <= aspect.angle <= 180.0:
                errors.append(f"aspect '{aspect.id}' angle must lie in [0, 180], got {aspect.angle!r}")
            if not math.isfinite(aspect.orb) or aspect.orb < 0.0:
                errors.append(f"aspect '{aspect.id}' orb must be finite and non-negative, got {aspect.orb!r}")
        if errors:
            raise ValidationError(errors)
        self._aspects = tuple(sorted(items, key=lambda item: (item.rank, item.angle, item.id)))
        self._by_id = {aspect.id: aspect for aspect in self._aspects}

    def __iter__(self) -> Iterator[Aspect]:
        return iter(self._aspects)

    def __len__(self) -> int:
        return len(self._aspects)

    def __contains__(self, aspect_id: object) -> bool:
        return aspect_id in self._by_id

    def __repr__(self) -> str:
        return f"AspectCatalog({', '.join(self.ids())})"

    def get(self, aspect_id: str) -> Optional[Aspect]:
        return self._by_id.get(aspect_id)

    def ids(self) -> List[str]:
        return [aspect.id for aspect in self._aspects]

    def matches(self, separation: float) -> List[Aspect]:
        """Return every aspect whose orb window contains ``separation``."""

        return [aspect for aspect in self._aspects if aspect.admits(separation)]

    def best_match(self, separation: float) -> Optional[Aspect]:
        """Return the closest admitting aspect, ``None`` when nothing matches."""

        best: Optional[Aspect] = None
        best_delta = math.inf
        for aspect in self._aspects:
            if not aspect.admits(separation):
                continue
            delta = aspect.delta(separation)
            # Entries arrive in rank order, so equal deltas keep the earlier one.
            if delta < best_delta:
                best, best_delta = aspect, delta
        return best

    def with_orbs(self, orbs: Mapping[str, float]) -> "AspectCatalog":
        """Return a copy with the orbs in ``orbs`` overridden by aspect id."""

        unknown = sorted(set(orbs) - set(self._by_id))
        if unknown:
            raise ValidationError([f"unknown aspect id '{name}'" for name in unknown])
        return AspectCatalog(
            replace(aspect, orb=float(orbs[aspect.id])) if aspect.id in orbs else aspect
            for aspect in self._aspects
        )

    def subset(self, ids: Iterable[str]) -> "AspectCatalog":
        """Return a catalog restricted to ``ids``."""

        wanted = [str(name).strip().lower() for name in ids]
        unknown = sorted(set(wanted) - set(self._by_id))
        if unknown:
            raise ValidationError([f"unknown aspect id '{name}'" for name in unknown])
        return AspectCatalog(aspect for aspect in self._aspects if aspect.id in wanted)

    def __add__(self, other: "AspectCatalog") -> "AspectCatalog":
        return AspectCatalog((*self._aspects, *other))


DEFAULT_CATALOG = AspectCatalog(MAJOR_ASPECTS)
FULL_CATALOG = AspectCatalog(MAJOR_ASPECTS + MINOR_ASPECTS)
