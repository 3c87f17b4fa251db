import pytest

from astrowheel.aspects.catalog import FULL_CATALOG, Aspect, AspectCatalog
from astrowheel.aspects.detector import (
    PRECISION_FLOOR,
    detect,
    match_pair,
    precision,
    transit_aspects,
)
from astrowheel.core.errors import ValidationError
from astrowheel.core.points import Point, PointSet


def _points(**angles) -> PointSet:
    return PointSet.from_mapping(angles)


def test_exact_opposition_has_full_precision():
    matches = detect(_points(Sun=0.0, Moon=180.0))
    assert len(matches) == 1
    match = matches[0]
    assert match.aspect.id == "opposition"
    assert match.precision == 1.0
    assert match.orb == 0.0
    assert match.label == "Opposition (180) Sun <> Moon"


def test_pairs_are_reported_once():
    matches = detect(_points(Sun=10.0, Moon=130.0))
    assert [(m.source, m.target) for m in matches] == [("Sun", "Moon")]


def test_out_of_orb_pairs_are_ignored():
    assert detect(_points(Sun=0.0, Moon=47.0)) == []


def test_orb_boundary_precision_is_floored():
    matches = detect(_points(Sun=0.0, Moon=47.0), catalog=FULL_CATALOG)
    assert [m.aspect.id for m in matches] == ["semisquare"]
    assert matches[0].precision == PRECISION_FLOOR


def test_precision_scales_linearly_inside_orb():
    trine = FULL_CATALOG.get("trine")
    assert precision(123.5, trine) == pytest.approx(0.5)
    assert precision(120.0, Aspect("exact", "Exact", 120.0, 0.0)) == 1.0


def test_separation_wraps_across_zero():
    match = match_pair(Point("Sun", 355.0), Point("Moon", 58.0))
    assert match is not None
    assert match.aspect.id == "sextile"
    assert match.separation == pytest.approx(63.0)


def test_results_follow_source_then_target_order():
    points = _points(Mars=0.0, Sun=90.0, Moon=180.0)
    matches = detect(points)
    assert [(m.source, m.target, m.aspect.id) for m in matches] == [
        ("Mars", "Sun", "square"),
        ("Mars", "Moon", "opposition"),
        ("Sun", "Moon", "square"),
    ]


def test_same_id_pairs_are_skipped():
    sources = _points(Sun=0.0)
    targets = _points(Sun=0.0, As=0.5)
    matches = detect(sources, targets)
    assert [(m.source, m.target) for m in matches] == [("Sun", "As")]


def test_non_finite_positions_raise():
    with pytest.raises(ValidationError):
        detect(PointSet([Point("Sun", float("nan")), Point("Moon", 10.0)]))


def test_custom_catalog_is_honoured():
    catalog = AspectCatalog([Aspect("septile", "Septile", 360.0 / 7, 1.0)])
    matches = detect(_points(Sun=0.0, Moon=51.0), catalog=catalog)
    assert [m.aspect.id for m in matches] == ["septile"]


def test_motion_is_reported_when_speeds_are_known():
    applying = detect(_points(Sun=[0.0, 1.0], Moon=[88.0, 13.0]))[0]
    separating = detect(_points(Sun=[0.0, 1.0], Moon=[92.0, 13.0]))[0]
    assert applying.motion == "applying"
    assert separating.motion == "separating"
    assert detect(_points(Sun=0.0, Moon=88.0))[0].motion is None


def test_motion_accounts_for_retrograde_target():
    match = detect(_points(Sun=[0.0, 1.0], Mercury=[4.0, -1.2]))[0]
    assert match.aspect.id == "conjunction"
    assert match.motion == "applying"


def test_transit_aspects_keep_same_named_pairs():
    transit = _points(Sun=120.0)
    radix = _points(Sun=0.0, Moon=240.0)
    matches = transit_aspects(transit, radix)
    assert [(m.source, m.target, m.aspect.id) for m in matches] == [
        ("Sun", "Sun", "trine"),
        ("Sun", "Moon", "trine"),
    ]


def test_as_dict_is_json_ready():
    payload = detect(_points(Sun=0.0, Moon=120.0))[0].as_dict()
    assert payload["aspect"] == "trine"
    assert payload["orb_limit"] == 7.0
    assert payload["color"].startswith("#")
