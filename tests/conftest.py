"""Pytest configuration for astrowheel."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

from astrowheel.core.points import PointSet

NATAL: Dict[str, Any] = {
    "planets": {
        "Sun": [300.2, 1.01],
        "Moon": [302.5, 13.2],
        "Mercury": [287.0, -0.3],
        "Venus": [330.0, 1.2],
        "Mars": [120.0, 0.5],
        "Jupiter": [60.4, 0.1],
        "Saturn": [210.0, 0.05],
    },
    "cusps": [300.0, 335.0, 10.0, 40.0, 65.0, 90.0, 120.0, 155.0, 190.0, 220.0, 245.0, 270.0],
}


@pytest.fixture
def natal_data() -> Dict[str, Any]:
    return json.loads(json.dumps(NATAL))


@pytest.fixture
def natal_points(natal_data: Dict[str, Any]) -> PointSet:
    return PointSet.from_mapping(natal_data["planets"])


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[str, Any], Path]:
    def _write(name: str, payload: Any) -> Path:
        target = tmp_path / name
        target.write_text(json.dumps(payload), encoding="utf-8")
        return target

    return _write


@pytest.fixture(autouse=True)
def _restore_logging():
    """The CLI reconfigures the root logger; put it back after each test."""

    root = logging.getLogger()
    engine = logging.getLogger("astrowheel")
    handlers = list(root.handlers)
    level = root.level
    engine_level = engine.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    engine.setLevel(engine_level)
    logging.captureWarnings(False)


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "astrowheel-home"
    monkeypatch.setenv("ASTROWHEEL_HOME", str(home))
    monkeypatch.delenv("ASTROWHEEL_LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    return home
