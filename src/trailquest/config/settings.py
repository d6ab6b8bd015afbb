# src/trailquest/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/trailquest/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `TRAILQUEST_LOG_LEVEL`, `TRAILQUEST_SNAP_MAX_RANGE_M`)
- an external YAML file via `TRAILQUEST_CONFIG_PATH`

Design rule:
- Tuning knobs live in YAML, not hard-coded in the discovery engine.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

from trailquest.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `trailquest.config`."""
    text = resources.files("trailquest.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "TrailQuest"
    timezone: str = "UTC"
    log_level: str = "INFO"


class CatalogSettings(BaseModel):
    path: str = "data/catalogs/sample_trail.json"


class DiscoverySettings(BaseModel):
    # Snap intensity falls to 0 at this distance when the caller gives no range.
    snap_max_range_m: float = Field(1000, gt=0)
    # Two decimals is roughly 1.1 km of precision.
    preview_location_decimals: int = Field(2, ge=0, le=6)


class GeoSettings(BaseModel):
    bounding_box_padding_m: float = Field(50, ge=0)


class RatingSettings(BaseModel):
    # Configuration may narrow the star range, never widen it beyond 1..5.
    min_rating: int = Field(1, ge=1, le=5)
    max_rating: int = Field(5, ge=1, le=5)

    @model_validator(mode="after")
    def _validate_order(self) -> "RatingSettings":
        if self.max_rating < self.min_rating:
            raise ValueError("ratings.max_rating must be >= ratings.min_rating")
        return self


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    discovery: DiscoverySettings = Field(default_factory=DiscoverySettings)
    geo: GeoSettings = Field(default_factory=GeoSettings)
    ratings: RatingSettings = Field(default_factory=RatingSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small so deployments cannot reshape the engine by accident.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("TRAILQUEST_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    catalog_path = os.getenv("TRAILQUEST_CATALOG_PATH")
    if catalog_path:
        data.setdefault("catalog", {})["path"] = catalog_path

    snap_range = os.getenv("TRAILQUEST_SNAP_MAX_RANGE_M")
    if snap_range:
        data.setdefault("discovery", {})["snap_max_range_m"] = float(snap_range)

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("TRAILQUEST_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
