"""Chart points and the ordered point sets consumed by the engines."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .errors import ValidationError

__all__ = [
    "DEFAULT_SYMBOL_RADIUS",
    "Point",
    "PointSet",
    "as_point_set",
    "validate_points",
]


DEFAULT_SYMBOL_RADIUS = 10.0


@dataclass(frozen=True, slots=True)
class Point:
    """A named position on the chart circle.

    ``speed`` is the daily motion when known; a negative value marks a
    retrograde body. ``radius`` is the symbol footprint used only by the
    collision resolver.
    """

    id: str
    angle: float
    speed: Optional[float] = None
    radius: float = DEFAULT_SYMBOL_RADIUS

    @property
    def is_retrograde(self) -> bool:
        return self.speed is not None and self.speed < 0

    @property
    def is_finite(self) -> bool:
        if not _is_number(self.angle) or not math.isfinite(self.angle):
            return False
        if self.speed is not None and (
            not _is_number(self.speed) or not math.isfinite(self.speed)
        ):
            return False
        return True


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class PointSet(Mapping[str, Point]):
    """Read-only, insertion ordered mapping of point id to :class:`Point`.

    Insertion order is meaningful: it breaks ties between points sitting at
    the same angle and fixes the order in which aspects are reported.
    """

    __slots__ = ("_points",)

    def __init__(self, points: Iterable[Point] = ()) -> None:
        ordered: Dict[str, Point] = {}
        duplicates: List[str] = []
        for point in points:
            if not isinstance(point, Point):
                raise ValidationError(f"expected Point, got {type(point).__name__}")
            if point.id in ordered:
                duplicates.append(point.id)
                continue
            ordered[point.id] = point
        if duplicates:
            raise ValidationError(
                [f"duplicate point id '{name}'" for name in duplicates]
            )
        self._points = ordered

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        *,
        radius: float = DEFAULT_SYMBOL_RADIUS,
    ) -> "PointSet":
        """Build a set from ``{"Sun": [angle, speed], "Moon": angle, ...}``.

        Each value is either a bare angle or a sequence whose first item is
        the angle and whose optional second item is the speed.
        """

        points: List[Point] = []
        errors: List[str] = []
        for name, raw in data.items():
            angle: Any
            speed: Any = None
            if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
                if not raw:
                    errors.append(f"point '{name}' has no angle")
                    continue
                angle = raw[0]
                if len(raw) > 1:
                    speed = raw[1]
            else:
                angle = raw
            if not _is_number(angle):
                errors.append(f"point '{name}' angle must be a number, got {angle!r}")
                continue
            if speed is not None and not _is_number(speed):
                errors.append(f"point '{name}' speed must be a number, got {speed!r}")
                continue
            points.append(
                Point(
                    id=str(name),
                    angle=float(angle),
                    speed=None if speed is None else float(speed),
                    radius=radius,
                )
            )
        if errors:
            raise ValidationError(errors)
        return cls(points)

    def merged(self, other: Iterable[Point] | Mapping[str, Any]) -> "PointSet":
        """Return a new set with ``other`` appended; its points win on id clashes."""

        extra = as_point_set(other)
        combined = dict(self._points)
        for point in extra.values():
            combined[point.id] = point
        return PointSet(combined.values())

    def index(self, point_id: str) -> int:
        for idx, name in enumerate(self._points):
            if name == point_id:
                return idx
        raise KeyError(point_id)

    def __getitem__(self, key: str) -> Point:
        return self._points[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __repr__(self) -> str:
        inner = ", ".join(f"{p.id}={p.angle:g}" for p in self._points.values())
        return f"PointSet({inner})"


def as_point_set(value: Any) -> PointSet:
    """Coerce ``value`` into a :class:`PointSet`.

    Accepts an existing set, a payload mapping understood by
    :meth:`PointSet.from_mapping` or an iterable of :class:`Point`.
    """

    if isinstance(value, PointSet):
        return value
    if isinstance(value, Mapping):
        return PointSet.from_mapping(value)
    if value is None:
        raise ValidationError("point set is required")
    return PointSet(value)


def validate_points(points: PointSet, *, allow_empty: bool = True) -> None:
    """Raise :class:`ValidationError` listing every malformed point."""

    errors: List[str] = []
    if not allow_empty and len(points) == 0:
        errors.append("point set must not be empty")
    for point in points.values():
        if not point.id:
            errors.append("point id must be a non-empty string")
        if not point.is_finite:
            errors.append(
                f"point '{point.id}' must have a finite angle and speed "
                f"(angle={point.angle!r}, speed={point.speed!r})"
            )
        elif not _is_number(point.radius) or not math.isfinite(point.radius) or point.radius < 0:
            errors.append(f"point '{point.id}' radius must be a finite non-negative number")
    if errors:
        raise ValidationError(errors)
