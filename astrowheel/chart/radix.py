"""Radix (natal) chart facade tying layout and aspect detection together.

A :class:`RadixChart` validates the chart payload once, then derives the
complete wheel geometry in :meth:`RadixChart.layout`. Located points are
handed explicitly to every later step (cusp lines, pointers, descriptions)
so that nothing depends on state left behind by a previous call.
"""

from __future__ import annotations

import copy
import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from astrowheel.aspects.catalog import AspectCatalog
from astrowheel.aspects.detector import AspectMatch, detect, transit_aspects
from astrowheel.config.settings import Settings, default_settings
from astrowheel.core.angles import normalize_degrees, project_on_circle
from astrowheel.core.errors import ValidationError
from astrowheel.core.points import Point, PointSet, as_point_set
from astrowheel.viz.collision import LayoutResult, resolve
from astrowheel.viz.wheel import (
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
    "AXIS_CUSPS",
    "AspectLine",
    "AxisMarker",
    "RadixChart",
    "RadixLayout",
    "validate_chart_data",
]

LOG = logging.getLogger(__name__)

CUSP_COUNT = 12

# Cusp index -> axis label, with the label's radial and angular offsets.
AXIS_CUSPS: Dict[int, Tuple[str, float, float]] = {
    0: ("As", 20.0, 0.0),
    3: ("Ic", 10.0, -2.0),
    6: ("Ds", 2.0, 0.0),
    9: ("Mc", 10.0, 2.0),
}


def _is_finite_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def validate_chart_data(data: Any) -> None:
    """Validate a ``{"planets": {...}, "cusps": [...]}`` payload.

    Every problem is collected and raised together as one
    :class:`ValidationError`.
    """

    if not isinstance(data, Mapping):
        raise ValidationError("chart data must be a mapping")
    errors: List[str] = []
    planets = data.get("planets")
    if not isinstance(planets, Mapping) or not planets:
        errors.append("chart data must contain a non-empty 'planets' mapping")
    else:
        for name, raw in planets.items():
            values = raw if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)) else [raw]
            if not values:
                errors.append(f"planet '{name}' has no position")
                continue
            for slot, value in enumerate(values[:2]):
                # A null speed means "unknown", as in PointSet.from_mapping.
                if slot == 1 and value is None:
                    continue
                if not _is_finite_number(value):
                    errors.append(f"planet '{name}' must hold finite numbers, got {raw!r}")
                    break
    cusps = data.get("cusps")
    if cusps is not None:
        if not isinstance(cusps, Sequence) or isinstance(cusps, (str, bytes)):
            errors.append("'cusps' must be a list of 12 numbers")
        else:
            if len(cusps) != CUSP_COUNT:
                errors.append(f"'cusps' must contain {CUSP_COUNT} values, got {len(cusps)}")
            for idx, value in enumerate(cusps):
                if not _is_finite_number(value):
                    errors.append(f"cusp {idx + 1} must be a finite number, got {value!r}")
    if errors:
        raise ValidationError(errors)


@dataclass(frozen=True, slots=True)
class AspectLine:
    """Aspect match with the chord drawn across the indoor circle."""

    match: AspectMatch
    segment: Segment


@dataclass(frozen=True, slots=True)
class AxisMarker:
    label: str
    segment: Segment
    label_anchor: Tuple[float, float]


@dataclass(frozen=True)
class RadixLayout:
    """Complete geometry of a radix wheel, ready to be drawn."""

    dimensions: WheelDimensions
    shift: float
    points: LayoutResult
    pointers: Tuple[PointerLines, ...]
    descriptions: Dict[str, Tuple[TextAnchor, ...]]
    cusps: Tuple[Tuple[Segment, ...], ...] = ()
    house_labels: Tuple[TextAnchor, ...] = ()
    axis: Tuple[AxisMarker, ...] = ()
    ruler: Tuple[Segment, ...] = ()
    signs: Tuple[SignSegment, ...] = ()
    aspects: Tuple[AspectLine, ...] = ()

    @property
    def degraded(self) -> bool:
        return self.points.degraded

    def as_dict(self) -> Dict[str, Any]:
        return {
            "shift": self.shift,
            "degraded": self.degraded,
            "min_separation": self.points.min_separation,
            "points": [
                {
                    "id": item.id,
                    "longitude": normalize_degrees(item.point.angle - self.shift),
                    "angle": item.angle,
                    "displacement": item.displacement,
                    "x": item.x,
                    "y": item.y,
                    "retrograde": item.point.is_retrograde,
                    "texts": [anchor.text for anchor in self.descriptions.get(item.id, ())],
                }
                for item in self.points
            ],
            "pointers": [
                {
                    "id": pointer.id,
                    "tick": pointer.tick.as_dict(),
                    "leader": pointer.leader.as_dict() if pointer.leader else None,
                }
                for pointer in self.pointers
            ],
            "cusps": [[segment.as_dict() for segment in lines] for lines in self.cusps],
            "house_labels": [
                {"text": anchor.text, "x": anchor.x, "y": anchor.y}
                for anchor in self.house_labels
            ],
            "axis": [
                {
                    "label": marker.label,
                    "line": marker.segment.as_dict(),
                    "anchor": list(marker.label_anchor),
                }
                for marker in self.axis
            ],
            "ruler": [segment.as_dict() for segment in self.ruler],
            "signs": [segment.as_dict() for segment in self.signs],
            "aspects": [
                {**line.match.as_dict(), "line": line.segment.as_dict()}
                for line in self.aspects
            ],
        }


class RadixChart:
    """Radix chart built from pre-computed longitudes.

    Parameters
    ----------
    data:
        ``{"planets": {"Sun": [lon, speed], ...}, "cusps": [12 lons]}``.
    cx, cy, radius:
        Center and outer radius of the wheel in drawing units.
    settings:
        Layout and aspect settings; defaults when omitted.
    """

    def __init__(
        self,
        data: Mapping[str, Any],
        cx: float = 0.0,
        cy: float = 0.0,
        radius: float = 300.0,
        *,
        settings: Optional[Settings] = None,
    ) -> None:
        validate_chart_data(data)
        if not _is_finite_number(radius) or radius <= 0:
            raise ValidationError(f"radius must be a positive number, got {radius!r}")
        self.settings = settings or default_settings()
        cfg = self.settings.layout
        self.dimensions = WheelDimensions(
            cx=float(cx),
            cy=float(cy),
            radius=float(radius),
            symbol_scale=cfg.symbol_scale,
            inner_ratio=cfg.inner_circle_ratio,
            indoor_ratio=cfg.indoor_circle_ratio,
            ruler_ratio=cfg.ruler_ratio,
            padding=cfg.padding,
            collision_radius=cfg.collision_radius,
        )
        self.planets = PointSet.from_mapping(
            data["planets"], radius=self.dimensions.symbol_radius
        )
        self.cusps: Tuple[float, ...] = tuple(float(value) for value in data.get("cusps") or ())
        self.points_of_interest = PointSet()
        self.shift = chart_shift(self.cusps)

    # Aspects -------------------------------------------------------------

    @property
    def catalog(self) -> AspectCatalog:
        return self.settings.aspects.catalog()

    def add_points_of_interest(self, points: Mapping[str, Any] | Iterable[Point]) -> "RadixChart":
        """Return a copy whose aspect targets also include ``points``.

        Points of interest (e.g. ``{"As": [0], "Mc": [270]}``) take part in
        aspect detection but are never drawn as planets.
        """

        clone = copy.copy(self)
        clone.points_of_interest = self.points_of_interest.merged(points)
        return clone

    def aspect_targets(self) -> PointSet:
        return self.planets.merged(self.points_of_interest)

    def aspects(self, custom: Optional[Iterable[AspectMatch]] = None) -> List[AspectMatch]:
        """Aspects between planets and planets plus points of interest.

        ``custom`` replaces detection with caller supplied matches.
        """

        if custom is not None:
            matches = list(custom)
            bad = [item for item in matches if not isinstance(item, AspectMatch)]
            if bad:
                raise ValidationError(f"custom aspects must be AspectMatch instances, got {bad[0]!r}")
            return matches
        return detect(self.planets, self.aspect_targets(), self.catalog)

    def transit_aspects(self, data: Mapping[str, Any] | PointSet) -> List[AspectMatch]:
        """Aspects from a transit chart's planets onto this chart's points."""

        if isinstance(data, PointSet):
            transit = data
        else:
            payload = data.get("planets", data) if isinstance(data, Mapping) else data
            transit = as_point_set(payload)
        return transit_aspects(transit, self.aspect_targets(), self.catalog)

    # Layout --------------------------------------------------------------

    def _screen_points(self) -> PointSet:
        return PointSet(
            Point(
                id=point.id,
                angle=normalize_degrees(point.angle + self.shift),
                speed=point.speed,
                radius=point.radius,
            )
            for point in self.planets.values()
        )

    def resolve_points(self) -> LayoutResult:
        dims = self.dimensions
        separation = self.settings.layout.min_separation_deg
        if separation is None:
            separation = dims.min_separation()
        return resolve(self._screen_points(), separation, dims.point_circle())

    def layout(self, custom_aspects: Optional[Iterable[AspectMatch]] = None) -> RadixLayout:
        """Compute the full wheel geometry."""

        dims = self.dimensions
        located = self.resolve_points()

        pointers = tuple(pointer_lines(item, dims) for item in located)
        descriptions: Dict[str, Tuple[TextAnchor, ...]] = {}
        for item in located:
            texts = describe_point(self.planets[item.id])
            if not self.settings.layout.show_dignities:
                texts = texts[:2]
            descriptions[item.id] = tuple(description_anchors(item, texts, dims.symbol_radius))

        cusps: Tuple[Tuple[Segment, ...], ...] = ()
        house_labels: Tuple[TextAnchor, ...] = ()
        axis: Tuple[AxisMarker, ...] = ()
        if self.cusps:
            cusps = tuple(
                tuple(
                    cusp_segments(
                        dims.center,
                        cusp + self.shift,
                        dims.indoor_radius,
                        dims.pointer_radius,
                        dims.point_radius,
                        located,
                        dims.symbol_radius,
                    )
                )
                for cusp in self.cusps
            )
            house_labels = tuple(
                TextAnchor(
                    str(idx + 1),
                    *project_on_circle(dims.center, dims.numbers_radius, angle + self.shift),
                )
                for idx, angle in enumerate(house_label_angles(self.cusps))
            )
            axis = tuple(self._axis_markers())

        ruler_start = dims.pointer_radius
        ruler = tuple(
            ruler_ticks(dims.center, ruler_start, ruler_start + dims.ruler_radius, self.shift)
        )
        signs = tuple(sign_segments(dims.center, dims.radius, dims.inner_radius, self.shift))

        lines = tuple(
            AspectLine(
                match=match,
                segment=Segment(
                    project_on_circle(dims.center, dims.indoor_radius, match.target_angle + self.shift),
                    project_on_circle(dims.center, dims.indoor_radius, match.source_angle + self.shift),
                ),
            )
            for match in self.aspects(custom_aspects)
        )
        LOG.debug(
            "Radix layout: %d points, %d cusps, %d aspect lines, shift %.3f°",
            len(located),
            len(self.cusps),
            len(lines),
            self.shift,
        )
        return RadixLayout(
            dimensions=dims,
            shift=self.shift,
            points=located,
            pointers=pointers,
            descriptions=descriptions,
            cusps=cusps,
            house_labels=house_labels,
            axis=axis,
            ruler=ruler,
            signs=signs,
            aspects=lines,
        )

    def _axis_markers(self) -> Iterable[AxisMarker]:
        dims = self.dimensions
        for idx, (label, radial, angular) in AXIS_CUSPS.items():
            angle = self.cusps[idx] + self.shift
            segment = Segment(
                project_on_circle(dims.center, dims.radius, angle),
                project_on_circle(dims.center, dims.axis_radius, angle),
            )
            anchor = project_on_circle(
                dims.center,
                dims.axis_radius + radial * dims.symbol_scale,
                angle + angular,
            )
            yield AxisMarker(label=label, segment=segment, label_anchor=anchor)
