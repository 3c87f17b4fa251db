"""Core primitives: angles, points and error types."""

from .angles import (
    angular_separation,
    chord_separation,
    classify_relative_motion,
    normalize_degrees,
    project_on_circle,
    signed_delta,
    to_degrees,
    to_radians,
)
from .errors import DegenerateGeometryWarning, ValidationError
from .points import Point, PointSet, as_point_set, validate_points

__all__ = [
    "DegenerateGeometryWarning",
    "Point",
    "PointSet",
    "ValidationError",
    "angular_separation",
    "as_point_set",
    "chord_separation",
    "classify_relative_motion",
    "normalize_degrees",
    "project_on_circle",
    "signed_delta",
    "to_degrees",
    "to_radians",
    "validate_points",
]
