"""
Accessibility feature (point-collection level).

This module lives in the `features/` layer:
- Ingestion (`ingestion/`) turns CSV rows + a geocoder into validated points.
- Features convert those points into stable numeric outputs (matrix + per-point averages).
- Analysis (`analysis/run.py`) attaches the numbers back onto location records.

Definitions:
- The distance matrix is square and symmetric; entry (i, j) is the great-circle
  distance between point i and point j in the unit implied by `radius`.
- The diagonal holds `None` ("self-distance, not applicable"), so a reduction that
  skips `None` can never count a point as its own zero-distance neighbor.
- The accessibility score of point i is the mean distance from i to every other point.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

from geoaccess.core.errors import EmptyInputError
from geoaccess.core.geo import (
    EARTH_RADIUS,
    DistanceFormula,
    GeoPoint,
    check_radius,
    resolve_formula,
    validate_point,
)


@dataclass(frozen=True)
class DistanceMatrix:
    # Row-major, immutable. `rows[i][i]` is always None.
    rows: tuple[tuple[float | None, ...], ...]
    formula: str
    radius: float

    @property
    def n(self) -> int:
        return len(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, key: tuple[int, int]) -> float | None:
        i, j = key
        return self.rows[i][j]

    def row(self, i: int) -> tuple[float | None, ...]:
        return self.rows[i]

    def off_diagonal(self, i: int) -> list[float]:
        """Distances from point i to every other point, in column order."""
        return [d for d in self.rows[i] if d is not None]

    def to_lists(self) -> list[list[float | None]]:
        return [list(r) for r in self.rows]


def _validated(points: Sequence[GeoPoint]) -> list[GeoPoint]:
    # Validate everything up front so one bad point never yields a half-built matrix.
    return [validate_point(p, index=i) for i, p in enumerate(points)]


def distance_matrix(
    points: Sequence[GeoPoint],
    formula: DistanceFormula = "haversine",
    radius: float = EARTH_RADIUS["miles"],
) -> DistanceMatrix:
    """Build the all-pairs distance matrix over `points` (upper triangle, mirrored)."""
    fn = resolve_formula(formula)
    r = check_radius(radius)
    pts = _validated(points)
    n = len(pts)
    if n < 1:
        raise EmptyInputError("distance_matrix requires at least one point")

    cells: list[list[float | None]] = [[None] * n for _ in range(n)]
    for i in range(n):
        for j in range(i + 1, n):
            d = fn(pts[i], pts[j], r)
            cells[i][j] = d
            cells[j][i] = d

    return DistanceMatrix(rows=tuple(tuple(row) for row in cells), formula=formula, radius=r)


def average_distances(matrix: DistanceMatrix) -> list[float]:
    """Mean distance from each point to all others (diagonal excluded), in input order."""
    n = matrix.n
    if n <= 1:
        raise EmptyInputError(f"average distance needs at least 2 points, got {n}")
    out: list[float] = []
    for i in range(n):
        others = matrix.off_diagonal(i)
        out.append(sum(others) / len(others))
    return out


def iter_average_distances(
    points: Sequence[GeoPoint],
    formula: DistanceFormula = "haversine",
    radius: float = EARTH_RADIUS["miles"],
) -> Iterator[float]:
    """Yield each point's average distance, one row at a time (O(n) memory).

    Unlike `distance_matrix`, each pair is evaluated twice; this trades CPU for not
    holding n*n floats. Validation and the `EmptyInputError` check happen before the
    first value is yielded.
    """
    fn = resolve_formula(formula)
    r = check_radius(radius)
    pts = _validated(points)
    n = len(pts)
    if n <= 1:
        raise EmptyInputError(f"average distance needs at least 2 points, got {n}")
    return _row_means(pts, fn, r)


def _row_means(pts: list[GeoPoint], fn, r: float) -> Iterator[float]:
    n = len(pts)
    for i in range(n):
        total = 0.0
        for j in range(n):
            if j != i:
                total += fn(pts[i], pts[j], r)
        yield total / (n - 1)


@dataclass(frozen=True)
class Neighbor:
    index: int
    distance: float


def nearest_neighbors(matrix: DistanceMatrix) -> list[Neighbor | None]:
    """Closest other point for each row (ties -> lowest index); None for a 1x1 matrix."""
    out: list[Neighbor | None] = []
    for i, row in enumerate(matrix.rows):
        best: Neighbor | None = None
        for j, d in enumerate(row):
            if d is None:
                continue
            if best is None or d < best.distance:
                best = Neighbor(index=j, distance=d)
        out.append(best)
    return out
