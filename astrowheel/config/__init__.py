"""Configuration helpers exposed at :mod:`astrowheel.config`."""

from __future__ import annotations

from .settings import (
    AspectsCfg,
    LayoutCfg,
    Settings,
    config_path,
    default_settings,
    get_config_home,
    load_settings,
    save_settings,
)

__all__ = [
    "AspectsCfg",
    "LayoutCfg",
    "Settings",
    "config_path",
    "default_settings",
    "get_config_home",
    "load_settings",
    "save_settings",
]
