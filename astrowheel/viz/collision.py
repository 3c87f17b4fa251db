"""Collision-free angular placement of chart symbols.

Symbols sit on a single ring, so two bodies a few degrees apart would draw
on top of each other. :func:`resolve` spreads such clusters apart until
every neighbour pair is at least ``min_separation`` degrees apart while
keeping the circular order of the bodies and moving them as little as
possible (least squares per cluster).

Clusters are merged with a pool-adjacent-violators pass: a block of ``m``
symbols is laid out at ``c, c+s, ..., c+(m-1)s`` where ``c`` is the mean of
``a_k - k*s``. Each merge removes a block, so a chart of ``N`` symbols
settles after at most ``N - 1`` merges, including the merges across the
0°/360° seam.
"""

from __future__ import annotations

import logging
import math
import warnings
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple, overload

from astrowheel.core.angles import (
    chord_separation,
    normalize_degrees,
    project_on_circle,
    signed_delta,
)
from astrowheel.core.errors import DegenerateGeometryWarning, ValidationError
from astrowheel.core.points import Point, PointSet, as_point_set, validate_points

__all__ = [
    "Circle",
    "LayoutResult",
    "LocatedPoint",
    "resolve",
]

LOG = logging.getLogger(__name__)

_EPS = 1e-9


@dataclass(frozen=True, slots=True)
class Circle:
    """Ring on which the symbols are laid out."""

    cx: float = 0.0
    cy: float = 0.0
    radius: float = 1.0

    @property
    def center(self) -> Tuple[float, float]:
        return (self.cx, self.cy)


@dataclass(frozen=True, slots=True)
class LocatedPoint:
    """A point together with the angle chosen for its symbol."""

    point: Point
    angle: float
    displacement: float
    x: float
    y: float

    @property
    def id(self) -> str:
        return self.point.id

    @property
    def raw_angle(self) -> float:
        return normalize_degrees(self.point.angle)

    @property
    def moved(self) -> bool:
        return abs(self.displacement) > _EPS


@dataclass(frozen=True)
class LayoutResult(Sequence):
    """Located points in input order plus layout diagnostics.

    ``degraded`` is set when the ring was too crowded to honour
    ``min_separation`` and the uniform fallback was used instead.
    """

    points: Tuple[LocatedPoint, ...]
    min_separation: float
    circle: Circle
    degraded: bool = False

    @overload
    def __getitem__(self, index: int) -> LocatedPoint: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[LocatedPoint, ...]: ...

    def __getitem__(self, index: Any) -> Any:
        return self.points[index]

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[LocatedPoint]:
        return iter(self.points)

    def by_id(self) -> Dict[str, LocatedPoint]:
        return {located.id: located for located in self.points}

    def angles(self) -> Dict[str, float]:
        return {located.id: located.angle for located in self.points}

    def as_point_set(self) -> PointSet:
        """Return the resolved angles as a new :class:`PointSet`."""

        return PointSet(
            Point(
                id=located.id,
                angle=located.angle,
                speed=located.point.speed,
                radius=located.point.radius,
            )
            for located in self.points
        )


class _Block:
    """Run of symbols packed exactly ``step`` degrees apart."""

    __slots__ = ("members", "total")

    def __init__(self, angle: float, order: int) -> None:
        self.members: List[Tuple[float, int]] = [(angle, order)]
        # Sum of ``a_k - k*step`` over the members.
        self.total = angle

    def start(self) -> float:
        return self.total / len(self.members)

    def end(self, step: float) -> float:
        return self.start() + (len(self.members) - 1) * step

    def absorb(self, other: "_Block", step: float) -> None:
        self.total += other.total - len(other.members) * len(self.members) * step
        self.members.extend(other.members)

    def shifted(self, delta: float) -> "_Block":
        self.members = [(angle + delta, order) for angle, order in self.members]
        self.total += delta * len(self.members)
        return self


def _sorted_sequence(points: Sequence[Point]) -> List[Tuple[float, int]]:
    """Angles in circular order, starting right after the widest gap."""

    ordered = sorted(
        ((normalize_degrees(point.angle), idx) for idx, point in enumerate(points)),
    )
    count = len(ordered)
    start = 0
    widest = -1.0
    for j in range(count):
        gap = ordered[j][0] - ordered[j - 1][0]
        if j == 0:
            gap += 360.0
        if gap > widest + _EPS:
            widest = gap
            start = j
    return ordered[start:] + [(angle + 360.0, idx) for angle, idx in ordered[:start]]


def _settle(stack: List[_Block], step: float) -> None:
    while len(stack) > 1 and stack[-1].start() - stack[-2].end(step) < step - _EPS:
        top = stack.pop()
        stack[-1].absorb(top, step)


def _pack(sequence: List[Tuple[float, int]], step: float) -> List[_Block]:
    stack: List[_Block] = []
    for angle, order in sequence:
        stack.append(_Block(angle, order))
        _settle(stack, step)
    while len(stack) > 1:
        first, last = stack[0], stack[-1]
        if first.start() + 360.0 - last.end(step) >= step - _EPS:
            break
        stack.pop(0)
        stack.append(first.shifted(360.0))
        _settle(stack, step)
    return stack


def _spread(sequence: List[Tuple[float, int]], count: int) -> List[float]:
    step = 360.0 / count
    anchor = sum(angle - k * step for k, (angle, _) in enumerate(sequence)) / count
    angles = [0.0] * count
    for k, (_, order) in enumerate(sequence):
        angles[order] = normalize_degrees(anchor + k * step)
    return angles


def resolve(
    points: PointSet | Any,
    min_separation: Optional[float] = None,
    circle: Optional[Circle] = None,
) -> LayoutResult:
    """Place ``points`` on ``circle`` so that no two symbols collide.

    Parameters
    ----------
    points:
        The bodies to place. Anything accepted by
        :func:`~astrowheel.core.points.as_point_set`.
    min_separation:
        Minimum angular distance in degrees between neighbouring symbols.
        Derived from the largest point radius and ``circle`` when omitted.
    circle:
        Ring used to project the resolved angles to ``x``/``y``.

    Returns
    -------
    LayoutResult
        Located points in the same order as ``points``. When
        ``len(points) * min_separation`` exceeds 360° the points are spaced
        uniformly, :class:`DegenerateGeometryWarning` is issued and the
        result is flagged ``degraded``.

    Raises
    ------
    ValidationError
        For an empty set, duplicate ids, non-finite angles or an invalid
        separation.
    """

    point_set = as_point_set(points)
    validate_points(point_set, allow_empty=False)
    if circle is not None and (not math.isfinite(circle.radius) or circle.radius < 0):
        raise ValidationError(f"circle radius must be finite and non-negative, got {circle.radius!r}")
    if min_separation is None:
        if circle is None:
            raise ValidationError("min_separation is required when no circle is given")
        largest = max(point.radius for point in point_set.values())
        min_separation = chord_separation(largest, circle.radius)
    step = float(min_separation)
    if not math.isfinite(step) or step < 0:
        raise ValidationError(f"min_separation must be finite and non-negative, got {min_separation!r}")
    ring = circle or Circle()

    ordered = list(point_set.values())
    count = len(ordered)
    degraded = False
    if count == 1:
        angles = [normalize_degrees(ordered[0].angle)]
    elif count * step > 360.0 + _EPS:
        degraded = True
        message = (
            f"{count} points need {count * step:.3f}° at {step:.3f}° separation; "
            f"falling back to uniform {360.0 / count:.3f}° spacing"
        )
        # configure_logging() routes this to the "py.warnings" logger.
        warnings.warn(message, DegenerateGeometryWarning, stacklevel=2)
        angles = _spread(_sorted_sequence(ordered), count)
    else:
        angles = [0.0] * count
        for block in _pack(_sorted_sequence(ordered), step):
            anchor = block.start()
            for k, (_, order) in enumerate(block.members):
                angles[order] = normalize_degrees(anchor + k * step)

    located: List[LocatedPoint] = []
    for point, angle in zip(ordered, angles):
        x, y = project_on_circle(ring.center, ring.radius, angle)
        located.append(
            LocatedPoint(
                point=point,
                angle=angle,
                displacement=signed_delta(point.angle, angle),
                x=x,
                y=y,
            )
        )
    LOG.debug(
        "Resolved %d points at %.3f° separation (%d moved, degraded=%s)",
        count,
        step,
        sum(1 for item in located if item.moved),
        degraded,
    )
    return LayoutResult(
        points=tuple(located),
        min_separation=step,
        circle=ring,
        degraded=degraded,
    )
