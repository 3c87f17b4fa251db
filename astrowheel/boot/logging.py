"""Root logger setup for the astrowheel CLI and embedding applications.

The layout and aspect engines only ever log through module loggers under
``astrowheel``: resolver and detector summaries at DEBUG. Crowded-ring
fallbacks are issued as :class:`~astrowheel.core.errors.DegenerateGeometryWarning`
and reach the log through :func:`logging.captureWarnings`.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

__all__ = ["ENGINE_LOGGER", "configure_logging", "resolve_level"]

ENGINE_LOGGER = "astrowheel"

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_DATEFMT = "%H:%M:%S"
# Checked in order; the package specific variable wins.
_LEVEL_ENV = ("ASTROWHEEL_LOG_LEVEL", "LOG_LEVEL")
_ALIASES = {"WARN": logging.WARNING, "FATAL": logging.CRITICAL}


def resolve_level(value: str | int | None) -> int:
    """Turn a level name or number into a :mod:`logging` level.

    Unknown or empty values resolve to INFO.
    """

    if isinstance(value, int):
        return value
    name = (value or "").strip().upper()
    if name.isdigit():
        return int(name)
    if name in _ALIASES:
        return _ALIASES[name]
    level = logging.getLevelName(name) if name else None
    return level if isinstance(level, int) else logging.INFO


def _level_from_environment() -> Optional[str]:
    for variable in _LEVEL_ENV:
        value = os.environ.get(variable, "").strip()
        if value:
            return value
    return None


def configure_logging(
    *,
    level: str | int | None = None,
    engine_level: str | int | None = None,
    capture_warnings: bool = True,
    **kwargs: Any,
) -> int:
    """Install a stream handler on the root logger and return its level.

    Parameters
    ----------
    level:
        Root level. Falls back to ``ASTROWHEEL_LOG_LEVEL``, then
        ``LOG_LEVEL``, then INFO.
    engine_level:
        Optional separate level for the ``astrowheel`` loggers, e.g. DEBUG
        to see layout summaries without debug output from other libraries.
    capture_warnings:
        Route :mod:`warnings` (including degraded layout warnings) to the
        ``py.warnings`` logger so they are reported once, through logging.
    kwargs:
        Forwarded to :func:`logging.basicConfig`.
    """

    effective = resolve_level(level if level is not None else _level_from_environment())
    kwargs.setdefault("format", _FORMAT)
    kwargs.setdefault("datefmt", _DATEFMT)
    kwargs.setdefault("force", True)
    logging.basicConfig(level=effective, **kwargs)
    engine = logging.getLogger(ENGINE_LOGGER)
    engine.setLevel(resolve_level(engine_level) if engine_level is not None else logging.NOTSET)
    logging.captureWarnings(capture_warnings)
    return effective
