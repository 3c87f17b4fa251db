"""Angle and polar geometry helpers shared by the layout and aspect engines.

Chart code compares longitudes constantly, and doing so with raw modulo
arithmetic invites subtle bugs around the 0°/360° boundary. The helpers in
this module centralise degree normalisation, circular separation and the
polar projection used by every wheel renderer.

The projection follows the wheel convention: 0° points to the left of the
center (9 o'clock) and angles grow counter-clockwise on screen, where the y
axis grows downward as in SVG.
"""

from __future__ import annotations

import math
from typing import Final, Tuple

__all__ = [
    "EPSILON_DEG",
    "angular_separation",
    "chord_separation",
    "classify_relative_motion",
    "normalize_degrees",
    "project_on_circle",
    "signed_delta",
    "to_degrees",
    "to_radians",
]


EPSILON_DEG: Final[float] = 1e-9

# Screen direction of 0° measured from the positive x axis.
_REFERENCE_DEG: Final[float] = 180.0


def to_radians(deg: float) -> float:
    """Convert degrees to radians without wrapping."""

    return deg * math.pi / 180.0


def to_degrees(rad: float) -> float:
    """Convert radians to degrees without wrapping."""

    return rad * 180.0 / math.pi


def normalize_degrees(angle: float) -> float:
    """Return ``angle`` normalised to the ``[0, 360)`` interval.

    Values within ``1e-9`` of ``360`` are coerced to ``0`` so callers can
    rely on a consistent wrap-around contract.
    """

    wrapped = float(angle) % 360.0
    if wrapped >= 360.0 - EPSILON_DEG:
        wrapped = 0.0
    return wrapped if wrapped >= 0.0 else wrapped + 360.0


def angular_separation(a: float, b: float) -> float:
    """Return the absolute circular separation in degrees within [0, 180]."""

    d = abs(normalize_degrees(a) - normalize_degrees(b))
    if d > 180.0:
        d = 360.0 - d
    return d


def signed_delta(a: float, b: float) -> float:
    """Smallest signed step from ``a`` to ``b`` in degrees, in (-180, 180]."""

    delta = (float(b) - float(a)) % 360.0
    if delta > 180.0:
        delta -= 360.0
    return delta


def project_on_circle(
    center: Tuple[float, float], radius: float, angle_deg: float
) -> Tuple[float, float]:
    """Project ``angle_deg`` on a circle of ``radius`` around ``center``."""

    cx, cy = center
    theta = to_radians(_REFERENCE_DEG - angle_deg)
    return cx + radius * math.cos(theta), cy + radius * math.sin(theta)


def chord_separation(symbol_radius: float, circle_radius: float) -> float:
    """Minimum angular gap keeping two symbols of ``symbol_radius`` apart.

    Two circles of radius ``r`` centred on a circle of radius ``R`` touch when
    the chord between them equals ``2r``, i.e. at ``2·asin(r/R)``.
    """

    if circle_radius <= 0.0 or symbol_radius >= circle_radius:
        return 180.0
    if symbol_radius <= 0.0:
        return 0.0
    return to_degrees(2.0 * math.asin(symbol_radius / circle_radius))


def classify_relative_motion(
    separation_deg: float,
    aspect_angle_deg: float,
    separation_rate_deg_per_day: float,
    *,
    tolerance: float = 1e-4,
) -> str:
    """Return ``"applying"``, ``"separating"`` or ``"stationary"``.

    ``separation_rate_deg_per_day`` is the rate at which the unsigned
    separation grows. An aspect applies while its orb shrinks.
    """

    offset = separation_deg - aspect_angle_deg
    if abs(separation_rate_deg_per_day) <= tolerance:
        return "stationary"
    if abs(offset) <= tolerance:
        return "separating"
    return "applying" if offset * separation_rate_deg_per_day < 0.0 else "separating"
