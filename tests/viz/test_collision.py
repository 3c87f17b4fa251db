import math
import warnings

import pytest

from astrowheel.core.angles import angular_separation, chord_separation
from astrowheel.core.errors import DegenerateGeometryWarning, ValidationError
from astrowheel.core.points import Point, PointSet
from astrowheel.viz.collision import Circle, resolve


def _points(**angles: float) -> PointSet:
    return PointSet(Point(name, angle) for name, angle in angles.items())


def _min_gap(angles):
    ordered = sorted(angles)
    gaps = [b - a for a, b in zip(ordered, ordered[1:])]
    gaps.append(ordered[0] + 360.0 - ordered[-1])
    return min(gaps)


def test_well_separated_points_are_untouched():
    result = resolve(_points(Sun=10.0, Moon=100.0, Mars=250.0), 8.0)
    assert [item.angle for item in result] == [10.0, 100.0, 250.0]
    assert not any(item.moved for item in result)
    assert not result.degraded


def test_output_keeps_input_order():
    result = resolve(_points(Mars=250.0, Sun=10.0, Moon=12.0), 8.0)
    assert [item.id for item in result] == ["Mars", "Sun", "Moon"]


def test_cluster_is_spread_symmetrically():
    result = resolve(_points(Sun=100.0, Moon=100.0), 10.0)
    angles = result.angles()
    assert angles["Sun"] == pytest.approx(95.0)
    assert angles["Moon"] == pytest.approx(105.0)
    assert result.by_id()["Sun"].displacement == pytest.approx(-5.0)


def test_ties_are_broken_by_insertion_order():
    result = resolve(_points(B=40.0, A=40.0, C=40.0), 6.0)
    angles = result.angles()
    assert angles["B"] < angles["A"] < angles["C"]
    assert angles["A"] == pytest.approx(40.0)


def test_cluster_across_zero_is_resolved_on_the_seam():
    result = resolve(_points(Pisces=355.0, Aries=5.0), 20.0)
    angles = result.angles()
    assert angles["Pisces"] == pytest.approx(350.0)
    assert angles["Aries"] == pytest.approx(10.0)
    assert angular_separation(angles["Pisces"], angles["Aries"]) == pytest.approx(20.0)


def test_chained_clusters_merge():
    result = resolve(_points(A=10.0, B=12.0, C=14.0, D=30.0), 10.0)
    angles = list(result.angles().values())
    assert _min_gap(angles) >= 10.0 - 1e-6
    # Circular order is preserved.
    assert angles == sorted(angles)


def test_crowded_ring_falls_back_to_uniform_spacing():
    points = PointSet(Point(f"p{idx}", idx * 1.5) for idx in range(20))
    with pytest.warns(DegenerateGeometryWarning):
        result = resolve(points, 30.0)
    assert result.degraded
    assert _min_gap(result.angles().values()) == pytest.approx(18.0)


def test_exactly_full_ring_is_not_degraded():
    points = PointSet(Point(f"p{idx}", idx * 2.0) for idx in range(12))
    with warnings.catch_warnings():
        warnings.simplefilter("error", DegenerateGeometryWarning)
        result = resolve(points, 30.0)
    assert not result.degraded
    assert _min_gap(result.angles().values()) >= 30.0 - 1e-6


def test_resolving_twice_changes_nothing():
    points = _points(Sun=300.2, Moon=302.5, Mercury=287.0, Venus=296.0)
    first = resolve(points, 9.0)
    second = resolve(first.as_point_set(), 9.0)
    for a, b in zip(first, second):
        assert b.angle == pytest.approx(a.angle, abs=1e-9)


def test_single_point_is_returned_as_is():
    result = resolve(_points(Sun=725.0), 30.0)
    assert result[0].angle == pytest.approx(5.0)
    assert not result[0].moved


def test_separation_defaults_to_symbol_chord():
    circle = Circle(0.0, 0.0, 200.0)
    result = resolve(_points(Sun=10.0, Moon=11.0), circle=circle)
    assert result.min_separation == pytest.approx(chord_separation(10.0, 200.0))
    sun, moon = result
    assert math.hypot(moon.x - sun.x, moon.y - sun.y) == pytest.approx(20.0)


def test_coordinates_follow_the_circle():
    result = resolve(_points(Sun=0.0), 5.0, Circle(50.0, 50.0, 10.0))
    assert result[0].x == pytest.approx(40.0)
    assert result[0].y == pytest.approx(50.0)


def test_zero_separation_keeps_coincident_points():
    result = resolve(_points(Sun=10.0, Moon=10.0), 0.0)
    assert [item.angle for item in result] == [10.0, 10.0]


def test_empty_set_is_rejected():
    with pytest.raises(ValidationError):
        resolve(PointSet(), 5.0)


def test_non_finite_angle_is_rejected():
    with pytest.raises(ValidationError) as excinfo:
        resolve(_points(Sun=float("nan"), Moon=10.0), 5.0)
    assert "Sun" in str(excinfo.value)


def test_duplicate_ids_are_rejected():
    with pytest.raises(ValidationError):
        resolve([Point("Sun", 1.0), Point("Sun", 50.0)], 5.0)


@pytest.mark.parametrize("separation", [-1.0, float("inf"), float("nan")])
def test_invalid_separation_is_rejected(separation):
    with pytest.raises(ValidationError):
        resolve(_points(Sun=1.0, Moon=50.0), separation)


def test_separation_or_circle_is_required():
    with pytest.raises(ValidationError):
        resolve(_points(Sun=1.0, Moon=50.0))
