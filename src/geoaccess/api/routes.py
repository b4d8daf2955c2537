"""
API routes.

Endpoints:
- POST `/api/distance`: great-circle distance between two points.
- POST `/api/distance-matrix`: all-pairs matrix (diagonal is `null`) + per-point averages.
- POST `/api/accessibility`: score a list of locations by average distance to the others.
- GET  `/api/settings`: public settings (paths redacted).
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from geoaccess.analysis.run import build_geocoder, run_accessibility
from geoaccess.config.settings import Settings, get_settings
from geoaccess.core.errors import EmptyInputError, InvalidPointError
from geoaccess.core.geo import GeoPoint as CoreGeoPoint, distance
from geoaccess.domain.models import (
    AccessibilityReport,
    AccessibilityRequest,
    DistanceMatrixRequest,
    DistanceRequest,
)
from geoaccess.features.accessibility import average_distances, distance_matrix

router = APIRouter()


def _formula_unit_radius(settings: Settings, formula: str | None, unit: str | None) -> tuple[str, str, float]:
    chosen_unit, radius = settings.distance.unit_and_radius(unit)
    return formula or settings.distance.formula, chosen_unit, radius


@router.post("/api/distance")
def post_distance(req: DistanceRequest) -> dict:
    settings = get_settings()
    formula, unit, radius = _formula_unit_radius(settings, req.formula, req.unit)
    a = CoreGeoPoint(lat=req.origin.lat, lon=req.origin.lon)
    b = CoreGeoPoint(lat=req.destination.lat, lon=req.destination.lon)
    return {"distance": distance(a, b, formula, radius), "formula": formula, "unit": unit}


@router.post("/api/distance-matrix")
def post_distance_matrix(req: DistanceMatrixRequest) -> dict:
    """Return the matrix; averages are `null` when fewer than two points are given."""
    settings = get_settings()
    formula, unit, radius = _formula_unit_radius(settings, req.formula, req.unit)
    points = [CoreGeoPoint(lat=p.lat, lon=p.lon) for p in req.points]
    matrix = distance_matrix(points, formula, radius)
    averages = average_distances(matrix) if matrix.n > 1 else None
    return {
        "formula": formula,
        "unit": unit,
        "matrix": matrix.to_lists(),
        "average_distances": averages,
    }


@router.post("/api/accessibility", response_model=AccessibilityReport)
def post_accessibility(req: AccessibilityRequest) -> AccessibilityReport:
    settings = get_settings()
    try:
        return run_accessibility(
            req.locations,
            settings=settings,
            geocoder=build_geocoder(settings),
            formula=req.formula,
            unit=req.unit,
            settings_overrides=req.settings_overrides,
        )
    except EmptyInputError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except InvalidPointError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except ValueError as e:
        # Disallowed or malformed settings_overrides.
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return settings safe to expose (file paths removed)."""
    settings = get_settings()
    data = settings.model_dump(mode="json")
    data.get("ingestion", {}).pop("geocode_table_path", None)
    return data
