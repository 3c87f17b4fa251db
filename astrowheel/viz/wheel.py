"""Radix wheel geometry derived from located points.

Everything here is a pure function of the chart data, the ring dimensions
and the output of :func:`astrowheel.viz.collision.resolve`. Renderers turn
the returned segments and anchors into shapes; nothing in this module knows
about SVG or any other drawing surface.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from astrowheel.core.angles import (
    angular_separation,
    chord_separation,
    normalize_degrees,
    project_on_circle,
)
from astrowheel.core.dignities import (
    DEFAULT_EXACT_EXALTATIONS,
    SIGNS,
    ExactExaltation,
    dignities,
)
from astrowheel.core.points import Point

from .collision import Circle, LocatedPoint

__all__ = [
    "RULER_STEP_DEG",
    "SIGN_DETAILS",
    "PointerLines",
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
    "ruler_ticks",
    "sign_segments",
]

RULER_STEP_DEG = 5.0
SIGN_SPAN_DEG = 30.0

Center = Tuple[float, float]

# sign id -> (name, description, band colour)
SIGN_DETAILS: Dict[str, Tuple[str, str, str]] = {
    "aries": ("Aries", "Cardinal fire sign ruled by Mars.", "#FF4500"),
    "taurus": ("Taurus", "Fixed earth sign ruled by Venus.", "#8B4513"),
    "gemini": ("Gemini", "Mutable air sign ruled by Mercury.", "#87CEEB"),
    "cancer": ("Cancer", "Cardinal water sign ruled by the Moon.", "#27AE60"),
    "leo": ("Leo", "Fixed fire sign ruled by the Sun.", "#FF4500"),
    "virgo": ("Virgo", "Mutable earth sign ruled by Mercury.", "#8B4513"),
    "libra": ("Libra", "Cardinal air sign ruled by Venus.", "#87CEEB"),
    "scorpio": ("Scorpio", "Fixed water sign ruled by Mars and Pluto.", "#27AE60"),
    "sagittarius": ("Sagittarius", "Mutable fire sign ruled by Jupiter.", "#FF4500"),
    "capricorn": ("Capricorn", "Cardinal earth sign ruled by Saturn.", "#8B4513"),
    "aquarius": ("Aquarius", "Fixed air sign ruled by Saturn and Uranus.", "#87CEEB"),
    "pisces": ("Pisces", "Mutable water sign ruled by Jupiter and Neptune.", "#27AE60"),
}


@dataclass(frozen=True, slots=True)
class Segment:
    start: Tuple[float, float]
    end: Tuple[float, float]

    def as_dict(self) -> dict:
        return {"x1": self.start[0], "y1": self.start[1], "x2": self.end[0], "y2": self.end[1]}


@dataclass(frozen=True, slots=True)
class TextAnchor:
    text: str
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class SignSegment:
    """One twelfth of the zodiac band with its symbol anchor and tooltip."""

    id: str
    name: str
    description: str
    color: str
    start_angle: float
    end_angle: float
    inner_radius: float
    outer_radius: float
    symbol_pos: Tuple[float, float]

    @property
    def tooltip(self) -> str:
        return f"{self.name}\n{self.description}"

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "color": self.color,
            "start_angle": self.start_angle,
            "end_angle": self.end_angle,
            "inner_radius": self.inner_radius,
            "outer_radius": self.outer_radius,
            "symbol": list(self.symbol_pos),
            "tooltip": self.tooltip,
        }


@dataclass(frozen=True, slots=True)
class PointerLines:
    """Tick at the true longitude and, for moved symbols, a leader line."""

    id: str
    tick: Segment
    leader: Optional[Segment] = None


@dataclass(frozen=True, slots=True)
class WheelDimensions:
    """Ring radii of a radix wheel, all derived from the outer ``radius``.

    The zodiac band takes ``radius / inner_ratio``; the degree ruler sits
    inside it and the planet symbols inside the ruler, ``padding`` away.
    """

    cx: float
    cy: float
    radius: float
    symbol_scale: float = 1.0
    inner_ratio: float = 8.0
    indoor_ratio: float = 2.5
    ruler_ratio: float = 4.0
    padding: float = 18.0
    collision_radius: float = 10.0

    @property
    def center(self) -> Center:
        return (self.cx, self.cy)

    @property
    def band_width(self) -> float:
        return self.radius / self.inner_ratio

    @property
    def inner_radius(self) -> float:
        return self.radius - self.band_width

    @property
    def indoor_radius(self) -> float:
        return self.radius / self.indoor_ratio

    @property
    def ruler_radius(self) -> float:
        return self.band_width / self.ruler_ratio

    @property
    def pointer_radius(self) -> float:
        return self.radius - (self.band_width + self.ruler_radius)

    @property
    def point_radius(self) -> float:
        return self.radius - (
            self.band_width + 2 * self.ruler_radius + self.padding * self.symbol_scale
        )

    @property
    def symbol_radius(self) -> float:
        return self.collision_radius * self.symbol_scale

    @property
    def numbers_radius(self) -> float:
        return self.indoor_radius + self.symbol_radius

    @property
    def axis_radius(self) -> float:
        return self.radius + self.band_width / 4

    def point_circle(self) -> Circle:
        return Circle(self.cx, self.cy, self.point_radius)

    def min_separation(self) -> float:
        return chord_separation(self.symbol_radius, self.point_radius)


def chart_shift(cusps: Optional[Sequence[float]]) -> float:
    """Rotation placing the first cusp (Ascendant) at 0° on screen."""

    if not cusps:
        return 0.0
    return normalize_degrees(360.0 - float(cusps[0]))


def cusp_segments(
    center: Center,
    angle: float,
    start_radius: float,
    end_radius: float,
    obstacle_radius: float,
    located: Iterable[LocatedPoint],
    symbol_radius: float,
) -> List[Segment]:
    """Cusp line from ``start_radius`` to ``end_radius``, broken around symbols.

    When a located symbol sits on the cusp the line is split in two, leaving
    ``symbol_radius`` of clearance on either side of ``obstacle_radius``.
    """

    half_width = chord_separation(symbol_radius, obstacle_radius) / 2.0
    blocked = any(
        angular_separation(item.angle, angle) <= half_width for item in located
    )
    if not blocked:
        return [
            Segment(
                project_on_circle(center, start_radius, angle),
                project_on_circle(center, end_radius, angle),
            )
        ]
    return [
        Segment(
            project_on_circle(center, start_radius, angle),
            project_on_circle(center, obstacle_radius - symbol_radius, angle),
        ),
        Segment(
            project_on_circle(center, obstacle_radius + symbol_radius, angle),
            project_on_circle(center, end_radius, angle),
        ),
    ]


def house_label_angles(cusps: Sequence[float]) -> List[float]:
    """Mid-angle of every house, following the cusps across 0°."""

    count = len(cusps)
    result: List[float] = []
    for idx in range(count):
        start = float(cusps[idx])
        end = float(cusps[(idx + 1) % count])
        gap = end - start
        if gap <= 0:
            gap += 360.0
        result.append(normalize_degrees(start + gap / 2.0))
    return result


def sign_segments(
    center: Center,
    outer_radius: float,
    inner_radius: float,
    shift: float = 0.0,
) -> List[SignSegment]:
    """Zodiac band between ``inner_radius`` and ``outer_radius``.

    Aries starts at ``shift`` on screen; each sign symbol sits in the middle
    of its segment, halfway across the band.
    """

    symbol_radius = outer_radius - (outer_radius - inner_radius) / 2.0
    segments: List[SignSegment] = []
    for idx, sign in enumerate(SIGNS):
        name, description, color = SIGN_DETAILS[sign]
        start = shift + idx * SIGN_SPAN_DEG
        segments.append(
            SignSegment(
                id=sign,
                name=name,
                description=description,
                color=color,
                start_angle=start,
                end_angle=start + SIGN_SPAN_DEG,
                inner_radius=inner_radius,
                outer_radius=outer_radius,
                symbol_pos=project_on_circle(center, symbol_radius, start + SIGN_SPAN_DEG / 2.0),
            )
        )
    return segments


def ruler_ticks(
    center: Center,
    start_radius: float,
    end_radius: float,
    shift: float = 0.0,
) -> List[Segment]:
    """Degree ruler: a tick every 5°, every other tick half length."""

    ticks: List[Segment] = []
    half = start_radius + (end_radius - start_radius) / 2.0
    for idx in range(int(360.0 / RULER_STEP_DEG)):
        angle = shift + idx * RULER_STEP_DEG
        outer = end_radius if idx % 2 == 0 else half
        ticks.append(
            Segment(
                project_on_circle(center, start_radius, angle),
                project_on_circle(center, outer, angle),
            )
        )
    return ticks


def describe_point(
    point: Point,
    exact_exaltations: Iterable[ExactExaltation] = DEFAULT_EXACT_EXALTATIONS,
) -> List[str]:
    """Degree within the sign, retrograde marker and dignity codes."""

    degree = int(math.floor(normalize_degrees(point.angle) + 0.5)) % 30
    codes = dignities(point.id, point.angle, exact_exaltations)
    return [str(degree), "R" if point.is_retrograde else "", ",".join(codes)]


def description_anchors(
    located: LocatedPoint,
    texts: Sequence[str],
    symbol_radius: float,
) -> List[TextAnchor]:
    """Stack ``texts`` beside the symbol of ``located``, one line each."""

    x = located.x + symbol_radius / 1.4
    y = located.y - symbol_radius
    line_height = symbol_radius / 0.4
    return [
        TextAnchor(text=text, x=x, y=y + line_height * idx)
        for idx, text in enumerate(texts)
    ]


def pointer_lines(
    located: LocatedPoint,
    dims: WheelDimensions,
) -> PointerLines:
    """Pointer tick at the true angle and a leader to the moved symbol.

    ``located.point.angle`` is expected to carry the chart shift already.
    """

    true_angle = located.point.angle
    tick_end = project_on_circle(
        dims.center, dims.pointer_radius - dims.ruler_radius / 2.0, true_angle
    )
    tick = Segment(project_on_circle(dims.center, dims.pointer_radius, true_angle), tick_end)
    leader = None
    if located.moved:
        leader = Segment(
            tick_end,
            project_on_circle(dims.center, dims.point_radius + dims.symbol_radius, located.angle),
        )
    return PointerLines(id=located.id, tick=tick, leader=leader)
