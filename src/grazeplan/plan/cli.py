"""Command-line front end for editing the rotation plan.

The plan lives in the data directory (see grazeplan.core.get_data_dir);
every command loads it, applies one change, re-derives the schedule and
saves it back.
"""

import argparse
import asyncio
import csv
import json
from dataclasses import asdict
from pathlib import Path

from grazeplan.core import format_area, format_density, get_area_unit, get_density_unit, settings
from grazeplan.data import drafts as draft_ops
from grazeplan.data.store import (
    load_drafts,
    load_plan,
    load_previous_season,
    save_drafts,
    save_plan,
    save_previous_season,
)
from grazeplan.plan.derive import NO_DATE, parse_date, to_iso
from grazeplan.plan.entries import default_entries, seed_previous_season, snapshot_planned
from grazeplan.plan.schedule import RotationPlan, in_summer
from grazeplan.plan.tabular import (
    apply_estimates,
    apply_previous_season,
    default_export_name,
    read_csv,
    write_csv,
)

SUMMER_MARK = "☀"

# =============================================================================
# Plan Loading
# =============================================================================


def load_rotation() -> RotationPlan:
    """Load the saved plan into a RotationPlan controller."""
    entries, season_start = load_plan()
    return RotationPlan(entries, season_start)


def save_rotation(plan: RotationPlan) -> None:
    save_plan(plan.entries, plan.season_start)


def _find_or_report(plan: RotationPlan, key: str):
    entry = plan.find(key)
    if entry is None:
        print(f"No entry matching '{key}' (use an id, #position or pasture name)")
    return entry


def _field_changes(args: argparse.Namespace) -> dict:
    """Collect entry field options that were given on the command line."""
    changes = {}
    for option, field_name in (
        ("pasture", "pasture"),
        ("acres", "acreage"),
        ("herd", "herd_size"),
        ("days", "grazing_days"),
        ("notes", "notes"),
    ):
        value = getattr(args, option, None)
        if value is not None:
            changes[field_name] = value
    return changes


# =============================================================================
# Display
# =============================================================================


def print_plan(plan: RotationPlan) -> None:
    """Print the plan as an aligned table with a totals row."""
    start = plan.season_start or "(not set)"
    print(f"Season start: {start}")
    print()
    print(
        f"{'#':>3} {'Pasture':<14} {'Area':>11} {'Herd':>5} "
        f"{'PrevPlan':>9} {'PrevAct':>9} {'EstPer':>8} {'EstNat':>8} "
        f"{'Days':>5} {get_density_unit():>8} {'Start':<10} {'End':<10}   Notes"
    )
    print("-" * 132)
    for i, e in enumerate(plan.entries, 1):
        mark = SUMMER_MARK if in_summer(e) else " "
        print(
            f"{i:>3} {e.pasture[:14]:<14} {format_area(e.acreage):>11} {e.herd_size:>5} "
            f"{format_density(e.prev_planned_ada):>9} {format_density(e.prev_actual_ada):>9} "
            f"{format_density(e.est_perennial_ada):>8} {format_density(e.est_native_ada):>8} "
            f"{e.grazing_days:>5} {format_density(e.proposed_ada):>8} "
            f"{e.start_date or '—':<10} {e.end_date or '—':<10} {mark} {e.notes}"
        )
    print("-" * 132)

    totals = plan.totals()
    print(f"Total proposed {get_density_unit()}: {format_density(totals.total_ada)}")
    print(f"Total grazing days: {totals.total_days}")
    if totals.summer_count:
        print(f"{SUMMER_MARK} {totals.summer_count} pasture(s) grazed during Jul 15 - Sep 15")


# =============================================================================
# Commands
# =============================================================================


async def cmd_show(args: argparse.Namespace) -> None:
    """Show the plan."""
    plan = load_rotation()
    if getattr(args, "json", False):
        output = {
            "season_start": plan.season_start,
            "area_unit": get_area_unit(),
            "entries": [e.to_dict() for e in plan.entries],
            "totals": asdict(plan.totals()),
        }
        print(json.dumps(output, indent=2))
        return
    print_plan(plan)


async def cmd_start(args: argparse.Namespace) -> None:
    """Set (or clear) the season start."""
    plan = load_rotation()
    value = args.date.strip()
    if value.lower() in ("", "none", "clear"):
        value = NO_DATE
    elif parse_date(value) is None:
        print(f"Warning: '{value}' is not a valid date; the schedule will have no dates until it is fixed")

    plan.set_season_start(value)
    save_rotation(plan)
    print(f"Season start: {plan.season_start or '(not set)'}")


async def cmd_add(args: argparse.Namespace) -> None:
    """Append a pasture to the rotation."""
    plan = load_rotation()
    changes = _field_changes(args)
    changes.pop("pasture", None)
    if "herd_size" not in changes:
        changes["herd_size"] = settings.default_herd_size
    entry = plan.add(args.name, **changes)
    plan.replace(seed_previous_season(plan.entries, load_previous_season()))
    save_rotation(plan)
    print(f"Added {entry.pasture} ({entry.id[:8]}) at position {len(plan.entries)}")


async def cmd_set(args: argparse.Namespace) -> None:
    """Edit fields of one entry."""
    plan = load_rotation()
    entry = _find_or_report(plan, args.key)
    if entry is None:
        return
    changes = _field_changes(args)
    if not changes:
        print("Nothing to change (give --pasture, --acres, --herd, --days or --notes)")
        return

    plan.update(entry.id, **changes)
    if "pasture" in changes:
        plan.replace(seed_previous_season(plan.entries, load_previous_season()))
    save_rotation(plan)
    updated = plan.find(entry.id)
    print(
        f"{updated.pasture}: {updated.grazing_days} days, {format_density(updated.proposed_ada)} "
        f"{get_density_unit()}, {updated.start_date or '—'} to {updated.end_date or '—'}"
    )


async def cmd_move(args: argparse.Namespace) -> None:
    """Move an entry to a new 1-based position."""
    plan = load_rotation()
    entry = _find_or_report(plan, args.key)
    if entry is None:
        return
    old_index = [e.id for e in plan.entries].index(entry.id)
    plan.move(old_index, args.position - 1)
    save_rotation(plan)
    new_position = [e.id for e in plan.entries].index(entry.id) + 1
    print(f"Moved {entry.pasture} to position {new_position}")


async def cmd_copy(args: argparse.Namespace) -> None:
    """Duplicate an entry right after itself."""
    plan = load_rotation()
    entry = _find_or_report(plan, args.key)
    if entry is None:
        return
    plan.duplicate(entry.id)
    save_rotation(plan)
    print(f"Copied {entry.pasture}")


async def cmd_remove(args: argparse.Namespace) -> None:
    """Delete an entry."""
    plan = load_rotation()
    entry = _find_or_report(plan, args.key)
    if entry is None:
        return
    plan.delete(entry.id)
    save_rotation(plan)
    print(f"Removed {entry.pasture}")


async def cmd_clear(args: argparse.Namespace) -> None:
    """Reset to a single blank entry."""
    plan = load_rotation()
    plan.clear()
    save_rotation(plan)
    print("Plan cleared")


async def cmd_reset(args: argparse.Namespace) -> None:
    """Reset to the built-in pasture list."""
    plan = load_rotation()
    plan.replace(seed_previous_season(default_entries(), load_previous_season()))
    save_rotation(plan)
    print(f"Plan reset to {len(plan.entries)} default pastures")


def _read_rows(path: str) -> list[dict] | None:
    try:
        return read_csv(Path(path))
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        print(f"CSV parse error: {e}")
        return None


async def cmd_import_estimates(args: argparse.Namespace) -> None:
    """Merge current-season native/perennial ADA estimates from CSV."""
    rows = _read_rows(args.csv)
    if rows is None:
        return
    plan = load_rotation()
    before = plan.entries
    plan.replace(apply_estimates(before, rows))
    save_rotation(plan)
    changed = sum(1 for old, new in zip(before, plan.entries) if old != new)
    print(f"Read {len(rows)} rows, updated {changed} entries")


async def cmd_import_previous(args: argparse.Namespace) -> None:
    """Merge previous-season planned/actual ADA from CSV."""
    rows = _read_rows(args.csv)
    if rows is None:
        return
    plan = load_rotation()
    entries, tables = apply_previous_season(plan.entries, load_previous_season(), rows)
    save_previous_season(tables)
    plan.replace(entries)
    save_rotation(plan)
    print(f"Read {len(rows)} rows; previous-season tables now cover {len(tables.planned | tables.actual)} pastures")


async def cmd_snapshot_planned(args: argparse.Namespace) -> None:
    """Store the current proposed ADA as next season's previous-planned values."""
    plan = load_rotation()
    tables = snapshot_planned(plan.entries, load_previous_season())
    save_previous_season(tables)
    plan.replace(seed_previous_season(plan.entries, tables))
    save_rotation(plan)
    print(f"Saved proposed {get_density_unit()} of {sum(1 for e in plan.entries if e.key)} pastures as previous planned")


async def cmd_export(args: argparse.Namespace) -> None:
    """Write the plan to CSV."""
    plan = load_rotation()
    path = Path(args.path) if args.path else Path(default_export_name())
    write_csv(plan.entries, path)
    print(f"Exported {len(plan.entries)} entries to {path}")


async def cmd_drafts(args: argparse.Namespace) -> None:
    """Save, list, load or delete drafts."""
    drafts = load_drafts()
    action = args.action

    if action == "save":
        plan = load_rotation()
        drafts, draft = draft_ops.save_draft(drafts, plan.entries, plan.season_start, name=args.name or "")
        save_drafts(drafts)
        year = draft_ops.draft_year(plan.season_start, draft.created_at)
        print(f"Saved Draft {len(drafts[year])} in {year}")
        return

    if action == "list":
        years = draft_ops.sorted_years(drafts)
        if not years:
            print("No drafts yet. Run 'grazeplan drafts save' to create one.")
            return
        for year in years:
            items = draft_ops.display_names(drafts, year)
            print(f"{year} ({len(items)} draft{'' if len(items) == 1 else 's'})")
            for label, draft in items:
                start = f"Start {draft.season_start}" if draft.season_start else "No season start"
                name = f" {draft.name}" if draft.name else ""
                saved = draft.created_at.strftime("%Y-%m-%d %H:%M")
                print(f"  {label}{name}: {start} • {saved} UTC • {len(draft.entries)} entries")
        return

    try:
        if action == "load":
            entries, season_start = draft_ops.load_draft(drafts, args.year, args.key)
            plan = load_rotation()
            plan.replace(entries, season_start=season_start)
            save_rotation(plan)
            print(f"Loaded draft {args.key} from {args.year} ({len(entries)} entries, start {season_start or 'not set'})")
        elif action == "delete":
            drafts = draft_ops.delete_draft(drafts, args.year, args.key)
            save_drafts(drafts)
            print(f"Deleted draft {args.key} from {args.year}")
    except draft_ops.DraftNotFoundError as e:
        print(str(e))


# -----------------------------------------------------------------------------
# CLI Entry Point
# -----------------------------------------------------------------------------


def _add_field_options(parser: argparse.ArgumentParser, with_pasture: bool = False) -> None:
    if with_pasture:
        parser.add_argument("--pasture", help="Pasture name")
    parser.add_argument("--acres", type=float, help="Area in acres")
    parser.add_argument("--herd", type=int, help="Herd size")
    parser.add_argument("--days", type=int, help="Planned grazing days")
    parser.add_argument("--notes", help="Free-text notes")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grazeplan",
        description="Sequential pasture rotation planner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Entries are addressed by id (or a 4+ character id prefix), by #position,
or by pasture name.

Examples:
  grazeplan show                          Plan table with totals
  grazeplan start 2025-03-01              Set the season start
  grazeplan set UA-E --days 10            Graze UA-E for 10 days
  grazeplan move UA-F 1                   Make UA-F the first stop
  grazeplan import-estimates est.csv      Merge native/perennial ADA estimates
  grazeplan import-previous last.csv      Merge previous-season ADA
  grazeplan export                        Write grazing_plan_<today>.csv
  grazeplan drafts save                   Snapshot the plan
  grazeplan drafts load 2025 2            Load Draft 2 of 2025
""",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    show_parser = subparsers.add_parser("show", help="Show the plan")
    show_parser.add_argument("--json", action="store_true", help="Output as JSON")

    start_parser = subparsers.add_parser("start", help="Set the season start date")
    start_parser.add_argument("date", help="Season start (YYYY-MM-DD, or 'none' to clear)")

    add_parser = subparsers.add_parser("add", help="Append a pasture")
    add_parser.add_argument("name", nargs="?", default="New Pasture", help="Pasture name")
    _add_field_options(add_parser)

    set_parser = subparsers.add_parser("set", help="Edit an entry")
    set_parser.add_argument("key", help="Entry id, #position or pasture name")
    _add_field_options(set_parser, with_pasture=True)

    move_parser = subparsers.add_parser("move", help="Move an entry to a new position")
    move_parser.add_argument("key", help="Entry id, #position or pasture name")
    move_parser.add_argument("position", type=int, help="New 1-based position")

    copy_parser = subparsers.add_parser("copy", help="Duplicate an entry")
    copy_parser.add_argument("key", help="Entry id, #position or pasture name")

    remove_parser = subparsers.add_parser("remove", help="Delete an entry")
    remove_parser.add_argument("key", help="Entry id, #position or pasture name")

    subparsers.add_parser("clear", help="Reset to a single blank entry")
    subparsers.add_parser("reset", help="Reset to the built-in pasture list")

    estimates_parser = subparsers.add_parser("import-estimates", help="Merge ADA estimates from CSV")
    estimates_parser.add_argument("csv", help="CSV file with pasture and estimate columns")

    previous_parser = subparsers.add_parser("import-previous", help="Merge previous-season ADA from CSV")
    previous_parser.add_argument("csv", help="CSV file with pasture and previous planned/actual columns")

    subparsers.add_parser("snapshot-planned", help="Save proposed ADA as previous-season planned")

    export_parser = subparsers.add_parser("export", help="Export the plan to CSV")
    export_parser.add_argument("path", nargs="?", help="Output file (default: grazing_plan_<today>.csv)")

    drafts_parser = subparsers.add_parser("drafts", help="Manage plan drafts")
    drafts_sub = drafts_parser.add_subparsers(dest="action", required=True)
    save_draft_parser = drafts_sub.add_parser("save", help="Snapshot the current plan")
    save_draft_parser.add_argument("--name", help="Optional draft name")
    drafts_sub.add_parser("list", help="List drafts by year")
    for action in ("load", "delete"):
        p = drafts_sub.add_parser(action, help=f"{action.capitalize()} a draft")
        p.add_argument("year", help="Draft year")
        p.add_argument("key", help="Draft number within the year, or draft id")

    return parser


COMMANDS = {
    "show": cmd_show,
    "start": cmd_start,
    "add": cmd_add,
    "set": cmd_set,
    "move": cmd_move,
    "copy": cmd_copy,
    "remove": cmd_remove,
    "clear": cmd_clear,
    "reset": cmd_reset,
    "import-estimates": cmd_import_estimates,
    "import-previous": cmd_import_previous,
    "snapshot-planned": cmd_snapshot_planned,
    "export": cmd_export,
    "drafts": cmd_drafts,
}


async def cli_main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return
    await handler(args)


def cli() -> None:
    """CLI entry point."""
    asyncio.run(cli_main())


if __name__ == "__main__":
    cli()
