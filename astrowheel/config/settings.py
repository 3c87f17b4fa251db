"""Configuration models and helpers for astrowheel settings."""

from __future__ import annotations

import os
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from astrowheel.aspects.catalog import FULL_CATALOG, MAJOR_ASPECTS, AspectCatalog
from astrowheel.core.errors import ValidationError


CURRENT_SETTINGS_SCHEMA_VERSION = 1

# -------------------- Settings Schema --------------------


class AspectsCfg(BaseModel):
    """Which aspects are detected and with what orbs."""

    include_minor: bool = False
    enabled: Optional[List[str]] = None
    orbs_by_aspect: Dict[str, float] = Field(default_factory=dict)

    @field_validator("enabled", mode="before")
    @classmethod
    def _normalise_enabled(cls, value: object) -> object:
        if value is None:
            return None
        if isinstance(value, str):
            value = [value]
        return [str(item).strip().lower() for item in value]  # type: ignore[union-attr]

    @field_validator("orbs_by_aspect", mode="before")
    @classmethod
    def _normalise_orbs(cls, value: object) -> object:
        if not value:
            return {}
        return {str(key).strip().lower(): max(0.0, float(orb)) for key, orb in dict(value).items()}  # type: ignore[call-overload]

    def catalog(self) -> AspectCatalog:
        """Build the effective :class:`AspectCatalog` for these settings."""

        base = FULL_CATALOG if self.include_minor else AspectCatalog(MAJOR_ASPECTS)
        if self.enabled is not None:
            base = FULL_CATALOG.subset(self.enabled)
        unknown = sorted(key for key in self.orbs_by_aspect if key not in FULL_CATALOG)
        if unknown:
            raise ValidationError([f"unknown aspect id '{name}' in orbs_by_aspect" for name in unknown])
        # Known aspects that are not enabled are ignored.
        overrides = {key: orb for key, orb in self.orbs_by_aspect.items() if key in base}
        return base.with_orbs(overrides) if overrides else base


class LayoutCfg(BaseModel):
    """Wheel proportions and symbol collision settings."""

    symbol_scale: float = 1.0
    collision_radius: float = 10.0
    min_separation_deg: Optional[float] = None
    inner_circle_ratio: float = 8.0
    indoor_circle_ratio: float = 2.5
    ruler_ratio: float = 4.0
    padding: float = 18.0
    show_dignities: bool = True

    @field_validator("symbol_scale", mode="before")
    @classmethod
    def _cap_symbol_scale(cls, value: float) -> float:
        numeric = float(value)
        return max(0.25, min(4.0, numeric))

    @field_validator("min_separation_deg", mode="before")
    @classmethod
    def _cap_min_separation(cls, value: Optional[float]) -> Optional[float]:
        if value is None:
            return None
        numeric = float(value)
        return max(0.0, min(180.0, numeric))

    @field_validator("inner_circle_ratio", "indoor_circle_ratio", "ruler_ratio", mode="before")
    @classmethod
    def _positive_ratio(cls, value: float) -> float:
        numeric = float(value)
        if numeric <= 0:
            raise ValueError("ratios must be positive")
        return numeric


class Settings(BaseModel):
    """Top level settings document persisted as YAML."""

    schema_version: int = CURRENT_SETTINGS_SCHEMA_VERSION
    aspects: AspectsCfg = Field(default_factory=AspectsCfg)
    layout: LayoutCfg = Field(default_factory=LayoutCfg)


# -------------------- I/O Helpers --------------------

CONFIG_FILENAME = "config.yaml"


def get_config_home() -> Path:
    """Return the directory where settings should be stored."""

    return Path(os.environ.get("ASTROWHEEL_HOME", str(Path.home() / ".astrowheel")))


def config_path() -> Path:
    """Return the full path to the configuration file, creating directories as needed."""

    home = get_config_home()
    home.mkdir(parents=True, exist_ok=True)
    return home / CONFIG_FILENAME


def default_settings() -> Settings:
    """Instantiate a Settings object populated with defaults."""

    return Settings()


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    """Persist the given settings to disk as YAML."""

    target_path = Path(path) if path else config_path()
    target_path.parent.mkdir(parents=True, exist_ok=True)
    data = settings.model_dump()
    with target_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False, allow_unicode=True)
    return target_path


def _upgrade_settings_payload(data: dict[str, object]) -> tuple[dict[str, object], bool]:
    """Stamp payloads written before the schema version marker existed."""

    upgraded = deepcopy(data)
    changed = False
    if upgraded.get("schema_version") != CURRENT_SETTINGS_SCHEMA_VERSION:
        upgraded["schema_version"] = CURRENT_SETTINGS_SCHEMA_VERSION
        changed = True
    return upgraded, changed


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from disk, creating defaults if missing."""

    source_path = Path(path) if path else config_path()
    if not source_path.exists():
        settings = default_settings()
        save_settings(settings, source_path)
        return settings
    with source_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raw = {}
    data, upgraded = _upgrade_settings_payload(raw)
    settings = Settings(**data)
    if upgraded:
        save_settings(settings, source_path)
    return settings
