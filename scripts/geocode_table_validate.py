from __future__ import annotations

import argparse
import json
from math import isfinite
from pathlib import Path
from typing import Any

from geoaccess.config.settings import get_settings
from geoaccess.core.env import resolve_project_path
from geoaccess.ingestion.addresses import clean_location
from geoaccess.ingestion.geocoding import StaticGeocoder
from geoaccess.ingestion.locations import load_locations_csv


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _bad_entry(value: Any) -> bool:
    if not isinstance(value, dict):
        return True
    lat = value.get("lat")
    lon = value.get("lon")
    if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
        return True
    return not (isfinite(lat) and isfinite(lon) and -90 <= lat <= 90 and -180 <= lon <= 180)


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Check a geocode lookup table against a locations CSV (offline).")
    p.add_argument("--locations", type=str, default="data/locations.csv")
    p.add_argument("--table", type=str, default="data/geocode_table.json")
    args = p.parse_args(argv)

    settings = get_settings()
    locations_path = resolve_project_path(args.locations)
    table_path = resolve_project_path(args.table)

    if not table_path.exists():
        print("Geocode table not found:", table_path)
        return 2

    payload = _read_json(table_path)
    if not isinstance(payload, dict):
        print("Invalid table shape: expected object mapping address -> {lat, lon}.")
        return 2

    bad_rows = [str(k) for k, v in payload.items() if _bad_entry(v)]

    locations = load_locations_csv(
        locations_path, columns=settings.ingestion.columns, encoding=settings.ingestion.encoding
    )
    geocoder = StaticGeocoder.from_json(table_path)

    with_coords = 0
    hits = 0
    misses: list[str] = []
    for raw in locations:
        loc = clean_location(raw)
        if loc.has_coordinates:
            with_coords += 1
            continue
        if geocoder.geocode(loc.full_address) is not None:
            hits += 1
        else:
            misses.append(loc.id)

    total = len(locations)
    resolved = with_coords + hits
    print("Locations:", locations_path)
    print("Rows:", total)
    print("Rows with coordinates:", with_coords)
    print("Geocode table:", table_path)
    print("Table entries:", len(payload))
    print("Table hits:", hits)
    print("Resolvable: %d (%.1f%%)" % (resolved, 100.0 * resolved / total if total else 0.0))
    if misses:
        print("Unresolved ids:", len(misses), "example:", ", ".join(misses[:8]))
    if bad_rows:
        print("Invalid table entries:", len(bad_rows), "example:", ", ".join(bad_rows[:8]))

    if bad_rows:
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
