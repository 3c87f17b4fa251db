"""Pairwise aspect detection between two point sets."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Set

from astrowheel.core.angles import (
    angular_separation,
    classify_relative_motion,
    signed_delta,
)
from astrowheel.core.points import Point, PointSet, as_point_set, validate_points

from .catalog import DEFAULT_CATALOG, Aspect, AspectCatalog

__all__ = [
    "PRECISION_FLOOR",
    "AspectMatch",
    "detect",
    "match_pair",
    "precision",
    "transit_aspects",
]

LOG = logging.getLogger(__name__)

# Smallest precision reported for a hit sitting exactly on the orb boundary.
PRECISION_FLOOR = 1e-6


@dataclass(frozen=True, slots=True)
class AspectMatch:
    """An aspect found between a source and a target point."""

    source: str
    target: str
    source_angle: float
    target_angle: float
    aspect: Aspect
    separation: float
    orb: float
    precision: float
    motion: Optional[str] = None

    @property
    def label(self) -> str:
        return (
            f"{self.aspect.name} ({self.aspect.angle:g}) "
            f"{self.source} <> {self.target}"
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "source_angle": self.source_angle,
            "target_angle": self.target_angle,
            "aspect": self.aspect.id,
            "name": self.aspect.name,
            "angle": self.aspect.angle,
            "color": self.aspect.color,
            "separation": self.separation,
            "orb": self.orb,
            "orb_limit": self.aspect.orb,
            "precision": self.precision,
            "motion": self.motion,
        }


def precision(separation: float, aspect: Aspect) -> float:
    """Return ``1 - |separation - angle| / orb`` clamped to ``(0, 1]``."""

    if aspect.orb <= 0.0:
        return 1.0
    value = 1.0 - aspect.delta(separation) / aspect.orb
    return min(1.0, max(PRECISION_FLOOR, value))


def _motion(source: Point, target: Point, separation: float, aspect: Aspect) -> Optional[str]:
    if source.speed is None and target.speed is None:
        return None
    delta = signed_delta(source.angle, target.angle)
    relative = (target.speed or 0.0) - (source.speed or 0.0)
    rate = relative if delta >= 0.0 else -relative
    return classify_relative_motion(separation, aspect.angle, rate)


def match_pair(
    source: Point,
    target: Point,
    catalog: AspectCatalog = DEFAULT_CATALOG,
) -> Optional[AspectMatch]:
    """Return the best aspect between two points, ``None`` when out of orb."""

    separation = angular_separation(source.angle, target.angle)
    aspect = catalog.best_match(separation)
    if aspect is None:
        return None
    return AspectMatch(
        source=source.id,
        target=target.id,
        source_angle=source.angle,
        target_angle=target.angle,
        aspect=aspect,
        separation=separation,
        orb=aspect.delta(separation),
        precision=precision(separation, aspect),
        motion=_motion(source, target, separation, aspect),
    )


def detect(
    sources: PointSet | Any,
    targets: PointSet | Any | None = None,
    catalog: AspectCatalog = DEFAULT_CATALOG,
    *,
    deduplicate: bool = True,
    skip_same_id: bool = True,
) -> List[AspectMatch]:
    """Detect aspects from every source point to every target point.

    Parameters
    ----------
    sources, targets:
        Point sets to compare. ``targets`` defaults to ``sources`` so a
        single chart yields its internal aspects.
    catalog:
        Aspects to look for.
    deduplicate:
        Report ``(a, b)`` and ``(b, a)`` once, keeping whichever comes first
        in traversal order. Disable when both sets reuse ids for different
        bodies, e.g. comparing two charts.
    skip_same_id:
        Ignore pairs whose ids are equal. Comparing two charts turns this
        off so that transiting Sun to radix Sun is reported.

    Returns
    -------
    list[AspectMatch]
        Ordered by source insertion order, then target insertion order.
    """

    source_set = as_point_set(sources)
    target_set = source_set if targets is None else as_point_set(targets)
    validate_points(source_set)
    if target_set is not source_set:
        validate_points(target_set)

    seen: Set[FrozenSet[str]] = set()
    matches: List[AspectMatch] = []
    for source in source_set.values():
        for target in target_set.values():
            if skip_same_id and source.id == target.id:
                continue
            key = frozenset((source.id, target.id))
            if deduplicate and key in seen:
                continue
            match = match_pair(source, target, catalog)
            if match is None:
                continue
            if deduplicate:
                seen.add(key)
            matches.append(match)
    LOG.debug(
        "Detected %d aspects between %d sources and %d targets",
        len(matches),
        len(source_set),
        len(target_set),
    )
    return matches


def transit_aspects(
    transit: PointSet | Any,
    radix: PointSet | Any,
    catalog: AspectCatalog = DEFAULT_CATALOG,
) -> List[AspectMatch]:
    """Aspects from transiting points onto radix points.

    The two charts share body names, so nothing is deduplicated and
    same-named pairs such as transiting Sun to radix Sun are kept.
    """

    return detect(transit, radix, catalog, deduplicate=False, skip_same_id=False)
