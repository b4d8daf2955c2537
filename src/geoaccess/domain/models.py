"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- ingestion outputs (`Location` rows from a CSV or an API payload)
- analysis output (`AccessibilityReport` with per-location scores)

Keeping these models in one place helps:
- validation (reject bad coordinates early),
- consistent JSON output across CLI/API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator


class GeoPoint(BaseModel):
    """A geographic point in decimal degrees."""

    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    lon: float = Field(..., ge=-180, le=180, allow_inf_nan=False)


class Location(BaseModel):
    """One input record: an addressable place, optionally already geocoded."""

    id: str
    name: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None

    lat: float | None = Field(default=None, ge=-90, le=90, allow_inf_nan=False)
    lon: float | None = Field(default=None, ge=-180, le=180, allow_inf_nan=False)

    extra: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str:
        return str(v).strip() if v is not None else v

    @model_validator(mode="after")
    def _both_or_neither(self) -> "Location":
        if (self.lat is None) != (self.lon is None):
            raise ValueError(f"location {self.id}: lat and lon must be given together")
        return self

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lon is not None

    @property
    def full_address(self) -> str:
        """Non-empty address parts joined with ', ' (street, city, state zip)."""
        state_zip = " ".join(p for p in [self.state, self.zip_code] if p and p.strip())
        parts = [self.address, self.city, state_zip]
        return ", ".join(p.strip() for p in parts if p and p.strip())


class DistanceRequest(BaseModel):
    origin: GeoPoint
    destination: GeoPoint
    formula: Literal["haversine", "spherical_law_of_cosines"] | None = None
    unit: Literal["miles", "kilometers", "meters"] | None = None


class DistanceMatrixRequest(BaseModel):
    points: list[GeoPoint] = Field(..., min_length=1)
    formula: Literal["haversine", "spherical_law_of_cosines"] | None = None
    unit: Literal["miles", "kilometers", "meters"] | None = None


class AccessibilityRequest(BaseModel):
    """API payload for an accessibility run over a list of locations."""

    locations: list[Location] = Field(..., min_length=1)
    formula: Literal["haversine", "spherical_law_of_cosines"] | None = None
    unit: Literal["miles", "kilometers", "meters"] | None = None
    settings_overrides: dict[str, Any] | None = None


class NearestNeighbor(BaseModel):
    id: str
    distance: float = Field(..., ge=0)


class ScoredLocation(BaseModel):
    """A resolved location plus its average distance to every other resolved location."""

    location: Location
    point: GeoPoint
    average_distance: float = Field(..., ge=0)
    nearest: NearestNeighbor | None = None


class GeocodeStats(BaseModel):
    total: int = Field(..., ge=0)
    resolved: int = Field(..., ge=0)
    dropped_ids: list[str] = Field(default_factory=list)

    @computed_field
    @property
    def dropped(self) -> int:
        return len(self.dropped_ids)

    @computed_field
    @property
    def drop_rate(self) -> float:
        return self.dropped / self.total if self.total else 0.0


class AccessibilityReport(BaseModel):
    generated_at: datetime
    formula: str
    unit: str
    radius: float
    stats: GeocodeStats
    results: list[ScoredLocation]
    meta: dict[str, Any] = Field(default_factory=dict)
