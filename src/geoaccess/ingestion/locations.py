"""
Location CSV loader.

The input is a CSV with a header row, one place per row. Column names are mapped
through `ingestion.columns` in settings so differently-labelled exports ("Address",
"ZIP", "Latitude") can be read without editing the file. We validate rows into
typed Pydantic models so downstream code can assume a consistent shape.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

from pydantic import TypeAdapter

from geoaccess.config.settings import CsvColumns
from geoaccess.core.env import resolve_project_path
from geoaccess.domain.models import Location

logger = logging.getLogger(__name__)

_LOCATIONS_ADAPTER = TypeAdapter(list[Location])


def _blank_to_none(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def row_to_payload(row: Mapping[str, Any], *, columns: CsvColumns, row_number: int) -> dict[str, Any]:
    """Map one CSV row (header -> cell) onto `Location` fields; the rest goes to `extra`."""
    mapping = columns.model_dump()
    used = set(mapping.values())
    payload: dict[str, Any] = {field: _blank_to_none(row.get(col)) for field, col in mapping.items()}
    if payload["id"] is None:
        payload["id"] = str(row_number)
    payload["extra"] = {k: v for k, v in row.items() if k is not None and k not in used}
    return payload


def parse_locations(rows: Iterable[Mapping[str, Any]], *, columns: CsvColumns | None = None) -> list[Location]:
    """Validate already-parsed rows (e.g. from `csv.DictReader`) into locations."""
    cols = columns or CsvColumns()
    payloads = [row_to_payload(row, columns=cols, row_number=i) for i, row in enumerate(rows, start=1)]
    return _LOCATIONS_ADAPTER.validate_python(payloads)


def load_locations_csv(
    path: str | Path,
    *,
    columns: CsvColumns | None = None,
    encoding: str = "utf-8",
) -> list[Location]:
    """Load and validate a locations CSV file."""
    resolved = resolve_project_path(path)
    with resolved.open("r", encoding=encoding, newline="") as f:
        reader = csv.DictReader(f)
        locations = parse_locations(reader, columns=columns)
    logger.info("Loaded %d locations from %s", len(locations), resolved)
    return locations
