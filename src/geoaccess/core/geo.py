from __future__ import annotations
from dataclasses import dataclass
from math import acos, asin, cos, isfinite, radians, sin, sqrt
from typing import Literal

from geoaccess.core.errors import InvalidPointError

"""
Great-circle distance on a spherical earth.

Two formulas are provided:
- `haversine`: numerically stable for tiny and near-antipodal separations (default).
- `spherical_law_of_cosines`: simpler, but loses precision for very small distances
  and near `acos(-1)` (antipodal points). The cosine argument is clamped to [-1, 1]
  so rounding never turns a valid pair into NaN.

The sphere radius selects the output unit (3959 -> miles, 6371 -> kilometers).
"""

DistanceFormula = Literal["haversine", "spherical_law_of_cosines"]

EARTH_RADIUS: dict[str, float] = {
    "miles": 3959.0,
    "kilometers": 6371.0,
    "meters": 6_371_000.0,
}

FORMULAS: tuple[str, ...] = ("haversine", "spherical_law_of_cosines")


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


def validate_point(p: GeoPoint, *, index: int | None = None) -> GeoPoint:
    """Return `p` unchanged, or raise `InvalidPointError` if it is not a usable coordinate."""
    lat = p.lat
    lon = p.lon
    if lat is None or lon is None:
        raise InvalidPointError("missing coordinate", index=index)
    if not (isfinite(lat) and isfinite(lon)):
        raise InvalidPointError(f"non-finite coordinate ({lat}, {lon})", index=index)
    if not -90.0 <= lat <= 90.0:
        raise InvalidPointError(f"latitude {lat} outside [-90, 90]", index=index)
    if not -180.0 <= lon <= 180.0:
        raise InvalidPointError(f"longitude {lon} outside [-180, 180]", index=index)
    return p


def radius_for_unit(unit: str) -> float:
    """Resolve a unit name (`miles`, `kilometers`, `meters`) to an earth radius."""
    key = str(unit).strip().lower()
    if key not in EARTH_RADIUS:
        raise ValueError(f"Unknown distance unit '{unit}'; expected one of {sorted(EARTH_RADIUS)}")
    return EARTH_RADIUS[key]


def check_radius(radius: float) -> float:
    r = float(radius)
    if not isfinite(r) or r <= 0:
        raise ValueError(f"radius must be a positive finite number, got {radius!r}")
    return r


def haversine(a: GeoPoint, b: GeoPoint, radius: float) -> float:
    """Haversine great-circle distance in the unit of `radius`."""
    lat1 = radians(a.lat)
    lon1 = radians(a.lon)
    lat2 = radians(b.lat)
    lon2 = radians(b.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # h can drift a hair above 1 for antipodal pairs.
    return 2 * radius * asin(sqrt(min(1.0, h)))


def law_of_cosines(a: GeoPoint, b: GeoPoint, radius: float) -> float:
    """Spherical-law-of-cosines distance in the unit of `radius`."""
    if a == b:
        return 0.0
    lat1 = radians(a.lat)
    lat2 = radians(b.lat)
    dlon = radians(b.lon - a.lon)

    c = sin(lat1) * sin(lat2) + cos(lat1) * cos(lat2) * cos(dlon)
    return radius * acos(max(-1.0, min(1.0, c)))


def resolve_formula(formula: str):
    if formula == "haversine":
        return haversine
    if formula == "spherical_law_of_cosines":
        return law_of_cosines
    raise ValueError(f"Unknown distance formula '{formula}'; expected one of {list(FORMULAS)}")


def distance(
    a: GeoPoint,
    b: GeoPoint,
    formula: DistanceFormula = "haversine",
    radius: float = EARTH_RADIUS["miles"],
) -> float:
    """Great-circle distance between two validated points."""
    fn = resolve_formula(formula)
    r = check_radius(radius)
    validate_point(a)
    validate_point(b)
    return fn(a, b, r)
