"""
Report formatting helpers.

Used by the CLI to print compact summaries and to write the scored table back out
as CSV (one row per resolved location, original columns first).
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any

from geoaccess.domain.models import AccessibilityReport

_BASE_FIELDS = ["id", "name", "address", "city", "state", "zip_code"]


def report_rows(report: AccessibilityReport) -> list[dict[str, Any]]:
    """Flatten a report into CSV-friendly dict rows."""
    rows: list[dict[str, Any]] = []
    for item in report.results:
        loc = item.location
        row: dict[str, Any] = {k: getattr(loc, k) for k in _BASE_FIELDS}
        row.update(loc.extra)
        row["lat"] = item.point.lat
        row["lon"] = item.point.lon
        row["average_distance"] = round(item.average_distance, 6)
        row["unit"] = report.unit
        row["nearest_id"] = item.nearest.id if item.nearest else None
        rows.append(row)
    return rows


def write_report_csv(report: AccessibilityReport, path: str | Path) -> Path:
    rows = report_rows(report)
    fieldnames: list[str] = []
    for row in rows:
        for k in row:
            if k not in fieldnames:
                fieldnames.append(k)
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)
    return out


def one_line_summary(report: AccessibilityReport) -> str:
    """Render a compact single-line summary for a report."""
    stats = report.stats
    parts = [
        f"resolved={stats.resolved}/{stats.total}",
        f"dropped={stats.dropped} ({100.0 * stats.drop_rate:.1f}%)",
        f"formula={report.formula}",
        f"unit={report.unit}",
    ]
    if report.results:
        avgs = [r.average_distance for r in report.results]
        parts.append(f"avg_min={min(avgs):.3f}")
        parts.append(f"avg_max={max(avgs):.3f}")
    return " | ".join(parts)
