# src/geoaccess/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/geoaccess/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `GEOACCESS_DISTANCE_UNIT`, `GEOACCESS_LOG_LEVEL`)
- an external YAML file via `GEOACCESS_CONFIG_PATH`

Design rule:
- Analysis knobs (formula, unit, column names) live in YAML, not hard-coded in business logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal
from geoaccess.core.env import load_dotenv_if_present

import yaml
from pydantic import BaseModel, Field, field_validator

from geoaccess.core.geo import radius_for_unit


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `geoaccess.config`."""
    text = resources.files("geoaccess.config").joinpath(filename).read_text(encoding="utf-8")
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
    name: str = "GeoAccess"
    timezone: str = "America/Chicago"
    log_level: str = "INFO"


class DistanceSettings(BaseModel):
    formula: Literal["haversine", "spherical_law_of_cosines"] = "haversine"
    unit: Literal["miles", "kilometers", "meters"] = "miles"
    # Explicit sphere radius; when set it wins over the unit table.
    radius: float | None = Field(default=None, gt=0)

    def resolved_radius(self) -> float:
        return float(self.radius) if self.radius is not None else radius_for_unit(self.unit)

    def unit_and_radius(self, unit: str | None = None) -> tuple[str, float]:
        """Resolve the output unit label and sphere radius.

        An explicit `unit` argument wins over settings. A configured `radius` that
        does not match the configured unit is labelled `custom`.
        """
        if unit:
            return unit, radius_for_unit(unit)
        radius = self.resolved_radius()
        if radius != radius_for_unit(self.unit):
            return "custom", radius
        return self.unit, radius


class AccessibilitySettings(BaseModel):
    # Above this many resolved points, averages are streamed row by row instead of
    # materializing the full n*n matrix.
    streaming_threshold: int = Field(2000, ge=2)
    include_nearest_neighbor: bool = True


class CsvColumns(BaseModel):
    id: str = "id"
    name: str = "name"
    address: str = "address"
    city: str = "city"
    state: str = "state"
    zip_code: str = "zip"
    lat: str = "lat"
    lon: str = "lon"


class IngestionSettings(BaseModel):
    columns: CsvColumns = Field(default_factory=CsvColumns)
    encoding: str = "utf-8"
    geocode_table_path: str | None = None

    @field_validator("encoding")
    @classmethod
    def _normalize_encoding(cls, v: str) -> str:
        return v.strip().lower() or "utf-8"


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    distance: DistanceSettings = Field(default_factory=DistanceSettings)
    accessibility: AccessibilitySettings = Field(default_factory=AccessibilitySettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("GEOACCESS_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    unit = os.getenv("GEOACCESS_DISTANCE_UNIT")
    if unit:
        data.setdefault("distance", {})["unit"] = unit.strip().lower()

    formula = os.getenv("GEOACCESS_DISTANCE_FORMULA")
    if formula:
        data.setdefault("distance", {})["formula"] = formula.strip().lower()

    geocode_table = os.getenv("GEOACCESS_GEOCODE_TABLE")
    if geocode_table:
        data.setdefault("ingestion", {})["geocode_table_path"] = geocode_table

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("GEOACCESS_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
