"""Rotation planning.

This module provides:
- Stocking density and date helpers (derive.py)
- Entries and list operations (entries.py)
- Sequential schedule derivation (schedule.py)
- CSV column rules and import/export (columns.py, tabular.py)
- The grazeplan CLI (cli.py)
"""

from grazeplan.plan.derive import (
    NO_DATE,
    add_days,
    format_date,
    overlaps_window,
    parse_date,
    stocking_density,
    to_iso,
    to_num,
)
from grazeplan.plan.entries import (
    Entry,
    PreviousSeason,
    add_entry,
    clear_entries,
    default_entries,
    delete_entry,
    duplicate_entry,
    find_entry,
    move_entry,
    new_entry,
    normalize_name,
    seed_previous_season,
    snapshot_planned,
    update_entry,
)
from grazeplan.plan.schedule import (
    PlanTotals,
    RotationPlan,
    derivation_key,
    derive_schedule,
    in_summer,
    summarize,
)

__all__ = [
    # derive
    "NO_DATE",
    "to_num",
    "stocking_density",
    "parse_date",
    "format_date",
    "to_iso",
    "add_days",
    "overlaps_window",
    # entries
    "Entry",
    "PreviousSeason",
    "new_entry",
    "default_entries",
    "clear_entries",
    "add_entry",
    "update_entry",
    "delete_entry",
    "duplicate_entry",
    "move_entry",
    "find_entry",
    "normalize_name",
    "seed_previous_season",
    "snapshot_planned",
    # schedule
    "derive_schedule",
    "derivation_key",
    "summarize",
    "in_summer",
    "PlanTotals",
    "RotationPlan",
]
