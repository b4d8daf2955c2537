"""
GeoAccess CLI entrypoint.

This CLI is intended for quick local analysis runs without the HTTP API.
It delegates all scoring logic to `geoaccess.analysis.run.run_accessibility`.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from pydantic import ValidationError

from geoaccess.analysis.report import one_line_summary, write_report_csv
from geoaccess.analysis.run import build_geocoder, run_accessibility
from geoaccess.config.settings import get_settings
from geoaccess.core.errors import EmptyInputError, InvalidPointError
from geoaccess.core.geo import EARTH_RADIUS, FORMULAS, GeoPoint, distance
from geoaccess.core.logging import configure_logging
from geoaccess.ingestion.geocoding import StaticGeocoder
from geoaccess.ingestion.locations import load_locations_csv


def _cmd_distance(args: argparse.Namespace) -> int:
    """Handle the `distance` subcommand."""
    settings = get_settings()
    formula = args.formula or settings.distance.formula
    unit, radius = settings.distance.unit_and_radius(args.unit)

    a = GeoPoint(lat=float(args.origin[0]), lon=float(args.origin[1]))
    b = GeoPoint(lat=float(args.destination[0]), lon=float(args.destination[1]))
    d = distance(a, b, formula, radius)

    if args.json:
        print(json.dumps({"distance": d, "unit": unit, "formula": formula}))
    else:
        print(f"{d:.4f} {unit} ({formula})")
    return 0


def _cmd_accessibility(args: argparse.Namespace) -> int:
    """Handle the `accessibility` subcommand."""
    settings = get_settings()
    locations = load_locations_csv(
        args.csv,
        columns=settings.ingestion.columns,
        encoding=settings.ingestion.encoding,
    )
    geocoder = StaticGeocoder.from_json(args.geocode_table) if args.geocode_table else build_geocoder(settings)

    report = run_accessibility(
        locations,
        settings=settings,
        geocoder=geocoder,
        formula=args.formula,
        unit=args.unit,
    )

    if args.out:
        path = write_report_csv(report, args.out)
        print(f"wrote {len(report.results)} rows to {path}", file=sys.stderr)

    if args.json:
        print(json.dumps(report.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0

    print(one_line_summary(report))
    ranked = sorted(report.results, key=lambda r: r.average_distance)
    for i, item in enumerate(ranked, start=1):
        loc = item.location
        label = loc.name or loc.full_address or loc.id
        nearest = f"  nearest={item.nearest.id} ({item.nearest.distance:.3f})" if item.nearest else ""
        print(f"{i:>3}. {label}  avg={item.average_distance:.3f} {report.unit}{nearest}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the GeoAccess CLI."""
    parser = argparse.ArgumentParser(prog="geoaccess")
    parser.add_argument("--log-level", type=str, default=None, help="Override configured log level.")
    sub = parser.add_subparsers(dest="command", required=True)

    dist = sub.add_parser("distance", help="Great-circle distance between two points.")
    dist.add_argument("--from", dest="origin", nargs=2, type=float, required=True, metavar=("LAT", "LON"))
    dist.add_argument("--to", dest="destination", nargs=2, type=float, required=True, metavar=("LAT", "LON"))
    dist.add_argument("--formula", choices=list(FORMULAS), default=None)
    dist.add_argument("--unit", choices=sorted(EARTH_RADIUS), default=None)
    dist.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    dist.set_defaults(func=_cmd_distance)

    acc = sub.add_parser(
        "accessibility",
        help="Average distance from each location in a CSV to every other location.",
    )
    acc.add_argument("csv", help="Locations CSV (header row; see ingestion.columns in config)")
    acc.add_argument("--geocode-table", default=None, help="JSON address -> {lat, lon} lookup table")
    acc.add_argument("--formula", choices=list(FORMULAS), default=None)
    acc.add_argument("--unit", choices=sorted(EARTH_RADIUS), default=None)
    acc.add_argument("--out", default=None, help="Write scored rows to this CSV path")
    acc.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    acc.set_defaults(func=_cmd_accessibility)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m geoaccess.cli`."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    func: Any = getattr(args, "func")
    try:
        return int(func(args))
    except (InvalidPointError, EmptyInputError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except ValidationError as e:
        # Bad input rows (e.g. out-of-range coordinates in the CSV).
        print(f"error: invalid input\n{e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
