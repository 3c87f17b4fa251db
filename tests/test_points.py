import pytest

from astrowheel.core.errors import ValidationError
from astrowheel.core.points import Point, PointSet, as_point_set, validate_points


def test_from_mapping_accepts_bare_angles_and_pairs():
    points = PointSet.from_mapping({"Sun": 10, "Moon": [20.5, -0.2], "Mars": [30.0]})
    assert list(points) == ["Sun", "Moon", "Mars"]
    assert points["Sun"].angle == 10.0
    assert points["Moon"].is_retrograde
    assert points["Mars"].speed is None


def test_from_mapping_collects_every_error():
    with pytest.raises(ValidationError) as excinfo:
        PointSet.from_mapping({"Sun": "ten", "Moon": [], "Mars": [1.0, "fast"]})
    assert len(excinfo.value.errors) == 3


def test_duplicate_ids_are_rejected():
    with pytest.raises(ValidationError, match="duplicate point id 'Sun'"):
        PointSet([Point("Sun", 1.0), Point("Sun", 2.0)])


def test_non_points_are_rejected():
    with pytest.raises(ValidationError):
        PointSet([("Sun", 1.0)])


def test_merged_appends_and_overrides():
    base = PointSet.from_mapping({"Sun": 1.0, "Moon": 2.0})
    merged = base.merged({"Moon": 5.0, "As": 100.0})
    assert list(merged) == ["Sun", "Moon", "As"]
    assert merged["Moon"].angle == 5.0
    assert base["Moon"].angle == 2.0
    assert merged.index("As") == 2


def test_as_point_set_coerces_inputs():
    existing = PointSet.from_mapping({"Sun": 1.0})
    assert as_point_set(existing) is existing
    assert list(as_point_set([Point("Moon", 3.0)])) == ["Moon"]
    with pytest.raises(ValidationError):
        as_point_set(None)


def test_validate_points_flags_non_finite_values():
    points = PointSet([Point("Sun", float("inf")), Point("Moon", 1.0, speed=float("nan"))])
    with pytest.raises(ValidationError) as excinfo:
        validate_points(points)
    assert len(excinfo.value.errors) == 2


def test_validate_points_can_require_content():
    validate_points(PointSet())
    with pytest.raises(ValidationError):
        validate_points(PointSet(), allow_empty=False)
