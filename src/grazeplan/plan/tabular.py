"""
CSV import and export for rotation entries.

Imports merge by normalized pasture name: rows that name no current entry
(or name nothing at all) are ignored, never an error.
"""

import csv
import math
import re
from dataclasses import replace
from datetime import date
from pathlib import Path

from grazeplan.plan.columns import ESTIMATE_RULES, PREVIOUS_SEASON_RULES, resolve_columns
from grazeplan.plan.entries import Entry, PreviousSeason, normalize_name, seed_previous_season, to_metric

# Fixed export columns: (header, Entry attribute)
EXPORT_COLUMNS = [
    ("Pasture", "pasture"),
    ("Acreage", "acreage"),
    ("HerdSize", "herd_size"),
    ("PrevPlannedADA", "prev_planned_ada"),
    ("PrevActualADA", "prev_actual_ada"),
    ("EstNativeADA", "est_native_ada"),
    ("EstPerennialADA", "est_perennial_ada"),
    ("GrazingDays", "grazing_days"),
    ("ProposedADA", "proposed_ada"),
    ("ProjectedStart", "start_date"),
    ("ProjectedEnd", "end_date"),
    ("Notes", "notes"),
]

_INT_RE = re.compile(r"^[+-]?\d+$")


# =============================================================================
# Reading
# =============================================================================


def coerce_cell(value):
    """Type a raw CSV cell: blank -> None, numeric text -> int/float."""
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    if _INT_RE.match(text):
        return int(text)
    try:
        number = float(text)
    except ValueError:
        return text
    return number if math.isfinite(number) else text


def read_csv(path: Path) -> list[dict]:
    """Read a CSV file with a header row into typed dicts.

    Blank lines and rows with no values are skipped.
    """
    rows = []
    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        for raw in reader:
            row = {key: coerce_cell(value) for key, value in raw.items() if key is not None}
            if any(value is not None for value in row.values()):
                rows.append(row)
    return rows


def _row_name(row: dict, column: str) -> str:
    value = row.get(column)
    return "" if value is None else str(value).strip()


# =============================================================================
# Merging
# =============================================================================


def apply_estimates(entries: list[Entry], rows: list[dict]) -> list[Entry]:
    """
    Merge current-season native/perennial ADA estimates into entries.

    Args:
        entries: Current entries
        rows: Typed CSV rows (see read_csv)

    Returns:
        New entry list; entries without a matching row are unchanged
    """
    if not rows:
        return list(entries)

    columns = resolve_columns(rows[0].keys(), ESTIMATE_RULES)

    lookup: dict[str, dict] = {}
    for row in rows:
        name = _row_name(row, columns["pasture"])
        if not name:
            continue
        lookup[normalize_name(name)] = {
            "est_native_ada": row.get(columns["est_native_ada"]),
            "est_perennial_ada": row.get(columns["est_perennial_ada"]),
        }

    result = []
    for entry in entries:
        hit = lookup.get(entry.key)
        if hit is None:
            result.append(entry)
            continue
        result.append(
            replace(
                entry,
                est_native_ada=to_metric(hit["est_native_ada"]),
                est_perennial_ada=to_metric(hit["est_perennial_ada"]),
            )
        )
    return result


def apply_previous_season(
    entries: list[Entry],
    tables: PreviousSeason,
    rows: list[dict],
) -> tuple[list[Entry], PreviousSeason]:
    """
    Merge previous-season planned/actual ADA rows into the lookup tables.

    The tables keep values for pastures not currently in the plan, so a
    later re-added pasture picks them up again.

    Returns:
        Tuple of (seeded entries, new tables)
    """
    if not rows:
        return list(entries), tables

    columns = resolve_columns(rows[0].keys(), PREVIOUS_SEASON_RULES)

    planned: dict[str, float] = {}
    actual: dict[str, float] = {}
    for row in rows:
        name = _row_name(row, columns["pasture"])
        if not name:
            continue
        planned_value = row.get(columns["prev_planned_ada"])
        actual_value = row.get(columns["prev_actual_ada"])
        if isinstance(planned_value, (int, float)):
            planned[name] = float(planned_value)
        if isinstance(actual_value, (int, float)):
            actual[name] = float(actual_value)

    new_tables = tables.merged(planned=planned, actual=actual)
    return seed_previous_season(entries, new_tables), new_tables


# =============================================================================
# Writing
# =============================================================================


def export_rows(entries: list[Entry]) -> list[dict]:
    """One row per entry with the fixed export columns."""
    return [{header: getattr(e, attr) for header, attr in EXPORT_COLUMNS} for e in entries]


def default_export_name(today: date | None = None) -> str:
    """Get the default export filename, like grazing_plan_2025-03-01.csv."""
    if today is None:
        today = date.today()
    return f"grazing_plan_{today.isoformat()}.csv"


def write_csv(entries: list[Entry], path: Path) -> Path:
    """Write the plan to a CSV file. Missing metrics are written blank."""
    path = Path(path)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=[header for header, _ in EXPORT_COLUMNS])
        writer.writeheader()
        for row in export_rows(entries):
            writer.writerow({k: ("" if v is None else v) for k, v in row.items()})
    return path
