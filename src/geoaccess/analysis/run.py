from __future__ import annotations

# This module is the "orchestrator" for an accessibility run.
# It wires together:
# - domain input (a list of Location records)
# - ingestion (address cleaning + coordinates/geocoder resolution)
# - the distance engine (matrix + per-point average distance)
# - the output model (AccessibilityReport, scores merged back onto locations by id)

import logging
import time
from datetime import datetime, timezone
from typing import Any, Mapping

from geoaccess.config.overrides import apply_settings_overrides
from geoaccess.config.settings import Settings, get_settings
from geoaccess.core.errors import EmptyInputError
from geoaccess.domain.models import (
    AccessibilityReport,
    GeoPoint as DomainGeoPoint,
    Location,
    NearestNeighbor,
    ScoredLocation,
)
from geoaccess.features.accessibility import (
    average_distances,
    distance_matrix,
    iter_average_distances,
    nearest_neighbors,
)
from geoaccess.ingestion.geocoding import Geocoder, StaticGeocoder, resolve_points

logger = logging.getLogger(__name__)


def build_geocoder(settings: Settings) -> Geocoder | None:
    """Return the configured offline geocoder, or None when no table is configured."""
    path = settings.ingestion.geocode_table_path
    if not path:
        return None
    return StaticGeocoder.from_json(path)


def run_accessibility(
    locations: list[Location],
    *,
    settings: Settings | None = None,
    geocoder: Geocoder | None = None,
    formula: str | None = None,
    unit: str | None = None,
    settings_overrides: Mapping[str, Any] | None = None,
) -> AccessibilityReport:
    """Score every resolvable location by its average distance to all the others.

    `formula`/`unit` win over settings; an explicit `distance.radius` in settings
    is only honored when no `unit` argument is given, and is reported as unit `custom`
    unless it matches the configured unit.
    """
    settings = apply_settings_overrides(settings or get_settings(), settings_overrides)
    started = time.perf_counter()

    chosen_formula = formula or settings.distance.formula
    chosen_unit, radius = settings.distance.unit_and_radius(unit)

    resolved, stats = resolve_points(locations, geocoder)
    if len(resolved) < 2:
        raise EmptyInputError(
            f"need at least 2 locations with coordinates, got {len(resolved)} of {stats.total}"
        )

    points = [p for _, p in resolved]
    nearest: list[NearestNeighbor | None] = [None] * len(points)
    streamed = len(points) > settings.accessibility.streaming_threshold
    if streamed:
        logger.info("Streaming averages for %d points (threshold=%d)", len(points), settings.accessibility.streaming_threshold)
        averages = list(iter_average_distances(points, chosen_formula, radius))
    else:
        matrix = distance_matrix(points, chosen_formula, radius)
        averages = average_distances(matrix)
        if settings.accessibility.include_nearest_neighbor:
            nearest = [
                NearestNeighbor(id=resolved[nb.index][0].id, distance=nb.distance) if nb else None
                for nb in nearest_neighbors(matrix)
            ]

    results = [
        ScoredLocation(
            location=loc,
            point=DomainGeoPoint(lat=pt.lat, lon=pt.lon),
            average_distance=avg,
            nearest=nb,
        )
        for (loc, pt), avg, nb in zip(resolved, averages, nearest)
    ]

    elapsed_ms = int((time.perf_counter() - started) * 1000)
    logger.info(
        "Scored %d locations (%s, %s) in %d ms", len(results), chosen_formula, chosen_unit, elapsed_ms
    )
    return AccessibilityReport(
        generated_at=datetime.now(timezone.utc),
        formula=chosen_formula,
        unit=chosen_unit,
        radius=radius,
        stats=stats,
        results=results,
        meta={"streamed": streamed, "elapsed_ms": elapsed_ms},
    )
