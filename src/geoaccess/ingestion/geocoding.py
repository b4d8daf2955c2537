"""
Geocoding collaborator.

Turning free-text addresses into coordinates is delegated to whatever service the
caller trusts; this module only defines the contract (`Geocoder`) and ships an
offline `StaticGeocoder` backed by a JSON lookup table (e.g. the saved output of a
previous batch geocoding run).

`resolve_points` applies the drop policy: a location with neither coordinates nor
a geocoder hit is excluded from the analysis, and the drop rate is reported as an
informational statistic rather than an error.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from geoaccess.core.env import resolve_project_path
from geoaccess.core.geo import GeoPoint, validate_point
from geoaccess.domain.models import GeocodeStats, Location
from geoaccess.ingestion.addresses import clean_location

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    def geocode(self, address: str) -> GeoPoint | None: ...


def _normalize_key(address: str) -> str:
    return " ".join(address.lower().split())


class StaticGeocoder:
    """Case/whitespace-insensitive address -> point lookup."""

    def __init__(self, table: dict[str, GeoPoint]):
        self._table = {_normalize_key(k): v for k, v in table.items()}

    def __len__(self) -> int:
        return len(self._table)

    @classmethod
    def from_json(cls, path: str | Path) -> "StaticGeocoder":
        """Load `{"<address>": {"lat": .., "lon": ..}, ...}`.

        Entries without two numeric, in-range coordinates are skipped with a warning,
        so the affected locations fall under the normal drop policy.
        """
        resolved = resolve_project_path(path)
        payload = json.loads(resolved.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError(f"Invalid geocode table {resolved}; expected a JSON object.")
        table: dict[str, GeoPoint] = {}
        for address, value in payload.items():
            if not isinstance(value, dict):
                continue
            lat = value.get("lat")
            lon = value.get("lon")
            if lat is None or lon is None:
                continue
            try:
                point = validate_point(GeoPoint(lat=float(lat), lon=float(lon)))
            except (TypeError, ValueError) as e:  # InvalidPointError is a ValueError
                logger.warning("Skipping geocode table entry %r: %s", address, e)
                continue
            table[str(address)] = point
        return cls(table)

    def geocode(self, address: str) -> GeoPoint | None:
        if not address:
            return None
        return self._table.get(_normalize_key(address))


def resolve_points(
    locations: list[Location],
    geocoder: Geocoder | None = None,
) -> tuple[list[tuple[Location, GeoPoint]], GeocodeStats]:
    """Pair each location with a point; unresolved locations are dropped and counted."""
    resolved: list[tuple[Location, GeoPoint]] = []
    dropped: list[str] = []
    for raw in locations:
        loc = clean_location(raw)
        point: GeoPoint | None = None
        if loc.has_coordinates:
            point = GeoPoint(lat=float(loc.lat), lon=float(loc.lon))
        elif geocoder is not None:
            point = geocoder.geocode(loc.full_address)
        if point is None:
            dropped.append(loc.id)
            continue
        resolved.append((loc, point))

    stats = GeocodeStats(total=len(locations), resolved=len(resolved), dropped_ids=dropped)
    if stats.dropped:
        logger.info(
            "Dropped %d of %d locations without coordinates (%.1f%%)",
            stats.dropped,
            stats.total,
            100.0 * stats.drop_rate,
        )
    return resolved, stats
