from __future__ import annotations

import pytest

from astrowheel.core.points import Point, PointSet
from astrowheel.viz.collision import resolve

hypothesis = pytest.importorskip("hypothesis")
given = hypothesis.given
st = hypothesis.strategies
settings = hypothesis.settings
assume = hypothesis.assume

ANGLES = st.lists(
    st.floats(min_value=0.0, max_value=359.999, allow_nan=False, allow_infinity=False),
    min_size=2,
    max_size=24,
)
SEPARATIONS = st.floats(min_value=0.5, max_value=40.0, allow_nan=False)


def _point_set(angles):
    return PointSet(Point(f"p{idx}", angle) for idx, angle in enumerate(angles))


def _gaps(located):
    ordered = sorted(item.angle for item in located)
    gaps = [b - a for a, b in zip(ordered, ordered[1:])]
    gaps.append(ordered[0] + 360.0 - ordered[-1])
    return gaps


@settings(deadline=None, max_examples=200)
@given(angles=ANGLES, separation=SEPARATIONS)
def test_resolved_gaps_respect_min_separation(angles, separation):
    assume(len(angles) * separation <= 360.0)
    result = resolve(_point_set(angles), separation)
    assert not result.degraded
    assert min(_gaps(result)) >= separation - 1e-6


@settings(deadline=None, max_examples=200)
@given(angles=ANGLES, separation=SEPARATIONS)
def test_resolve_is_idempotent(angles, separation):
    first = resolve(_point_set(angles), separation)
    second = resolve(first.as_point_set(), separation)
    for a, b in zip(first, second):
        assert abs(((b.angle - a.angle) + 180.0) % 360.0 - 180.0) < 1e-6


@settings(deadline=None, max_examples=200)
@given(angles=ANGLES, separation=SEPARATIONS)
def test_every_point_is_placed_in_range(angles, separation):
    result = resolve(_point_set(angles), separation)
    assert len(result) == len(angles)
    assert all(0.0 <= item.angle < 360.0 for item in result)
