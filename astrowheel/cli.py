"""Command line interface for astrowheel.

Chart payloads are JSON documents shaped like::

    {
      "planets": {"Sun": [120.5], "Moon": [123.0, -0.4]},
      "cusps": [300, 340, 30, 60, 75, 90, 116, 172, 210, 236, 250, 274],
      "points_of_interest": {"As": [300], "Mc": [236]}
    }
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import warnings
from collections.abc import Iterable, Mapping
from contextlib import nullcontext
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as SettingsError

from .aspects.detector import detect, transit_aspects
from .boot.logging import configure_logging
from .chart.radix import RadixChart, validate_chart_data
from .config.settings import Settings, default_settings, load_settings
from .core.errors import DegenerateGeometryWarning, ValidationError
from .core.points import PointSet
from .viz.collision import Circle, resolve

LOG = logging.getLogger(__name__)

EXIT_INVALID = 2


def _read_payload(path: str) -> Mapping[str, Any]:
    source = nullcontext(sys.stdin) if path == "-" else Path(path).open("r", encoding="utf-8")
    with source as handle:
        try:
            payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"{path}: invalid JSON ({exc.msg} at line {exc.lineno})") from exc
    validate_chart_data(payload)
    return payload


def _settings(namespace: argparse.Namespace) -> Settings:
    if namespace.config:
        return load_settings(Path(namespace.config))
    return default_settings()


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _points_of_interest(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    extra = payload.get("points_of_interest") or {}
    if not isinstance(extra, Mapping):
        raise ValidationError("'points_of_interest' must be a mapping")
    return extra


def cmd_layout(namespace: argparse.Namespace) -> int:
    payload = _read_payload(namespace.path)
    settings = _settings(namespace)
    points = PointSet.from_mapping(
        payload["planets"], radius=settings.layout.collision_radius * settings.layout.symbol_scale
    )
    separation = namespace.min_separation
    if separation is None:
        separation = settings.layout.min_separation_deg
    result = resolve(points, separation, Circle(0.0, 0.0, namespace.radius))
    _emit(
        {
            "degraded": result.degraded,
            "min_separation": result.min_separation,
            "points": [
                {
                    "id": item.id,
                    "longitude": item.raw_angle,
                    "angle": item.angle,
                    "displacement": item.displacement,
                    "x": item.x,
                    "y": item.y,
                }
                for item in result
            ],
        }
    )
    return 0


def cmd_aspects(namespace: argparse.Namespace) -> int:
    payload = _read_payload(namespace.path)
    settings = _settings(namespace)
    if namespace.minor:
        settings = settings.model_copy(
            update={"aspects": settings.aspects.model_copy(update={"include_minor": True})}
        )
    catalog = settings.aspects.catalog()
    planets = PointSet.from_mapping(payload["planets"])
    targets = planets.merged(_points_of_interest(payload))
    if namespace.transit:
        transit = _read_payload(namespace.transit)
        matches = transit_aspects(PointSet.from_mapping(transit["planets"]), targets, catalog)
    else:
        matches = detect(planets, targets, catalog)
    _emit([match.as_dict() for match in matches])
    return 0


def cmd_chart(namespace: argparse.Namespace) -> int:
    payload = _read_payload(namespace.path)
    chart = RadixChart(
        payload,
        namespace.cx,
        namespace.cy,
        namespace.radius,
        settings=_settings(namespace),
    )
    extra = _points_of_interest(payload)
    if extra:
        chart = chart.add_points_of_interest(extra)
    _emit(chart.layout().as_dict())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="astrowheel",
        description="Collision-free chart layout and aspect detection",
    )
    parser.add_argument("--config", help="Path to a settings YAML file")
    parser.add_argument("--log-level", help="Logging level (default: $LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="command")

    layout = sub.add_parser("layout", help="Resolve symbol collisions for a chart's planets")
    layout.add_argument("path", help="Chart JSON file, '-' for stdin")
    layout.add_argument("--radius", type=float, default=220.0, help="Symbol ring radius")
    layout.add_argument(
        "--min-separation",
        type=float,
        help="Minimum degrees between symbols (default: derived from the symbol size)",
    )
    layout.set_defaults(func=cmd_layout)

    aspects = sub.add_parser("aspects", help="Detect aspects between a chart's points")
    aspects.add_argument("path", help="Chart JSON file, '-' for stdin")
    aspects.add_argument("--minor", action="store_true", help="Include minor aspects")
    aspects.add_argument("--transit", help="Transit chart JSON compared against the chart")
    aspects.set_defaults(func=cmd_aspects)

    chart = sub.add_parser("chart", help="Full radix wheel geometry")
    chart.add_argument("path", help="Chart JSON file, '-' for stdin")
    chart.add_argument("--cx", type=float, default=300.0)
    chart.add_argument("--cy", type=float, default=300.0)
    chart.add_argument("--radius", type=float, default=300.0)
    chart.set_defaults(func=cmd_chart)
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    configure_logging(level=namespace.log_level)
    func = getattr(namespace, "func", None)
    if func is None:
        parser.print_help()
        return 0
    LOG.debug("Running '%s' on %s", namespace.command, namespace.path)
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("always", DegenerateGeometryWarning)
            return func(namespace)
    except ValidationError as exc:
        for error in exc.errors:
            print(f"error: {error}", file=sys.stderr)
        return EXIT_INVALID
    except SettingsError as exc:
        for detail in exc.errors():
            location = ".".join(str(part) for part in detail["loc"])
            print(f"error: settings {location}: {detail['msg']}", file=sys.stderr)
        return EXIT_INVALID
    except (OSError, yaml.YAMLError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INVALID
