"""
JSON persistence for the working plan.

Files in the data directory (see grazeplan.core.get_data_dir):
- plan.json: season start + entries
- previous_season.json: previous-season planned/actual ADA tables
- drafts.json: drafts by year
- boundaries.geojson: last imported pasture boundaries

Missing or unreadable files load as empty defaults.
"""

import json
from pathlib import Path

from grazeplan.core.config import get_data_dir
from grazeplan.data.drafts import Drafts, drafts_from_dict, drafts_to_dict
from grazeplan.mapping.features import BoundaryImportError, FeatureSet, parse_feature_collection
from grazeplan.plan.derive import to_iso
from grazeplan.plan.entries import Entry, PreviousSeason, default_entries, seed_previous_season
from grazeplan.plan.schedule import derive_schedule

PLAN_FILE = "plan.json"
PREVIOUS_SEASON_FILE = "previous_season.json"
DRAFTS_FILE = "drafts.json"
BOUNDARIES_FILE = "boundaries.geojson"


def _path(name: str, data_dir: Path | None) -> Path:
    if data_dir is None:
        data_dir = get_data_dir()
    return Path(data_dir) / name


def _read_json(path: Path, default):
    if not path.exists():
        return default
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError, OSError):
        return default


def _write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    return path


# =============================================================================
# Plan
# =============================================================================


def load_plan(data_dir: Path | None = None) -> tuple[list[Entry], str]:
    """
    Load the working plan.

    Falls back to the built-in pasture list when nothing is stored.
    Previous-season values are seeded and the schedule is re-derived, so
    stored derived fields are never trusted.

    Returns:
        Tuple of (entries, season_start)
    """
    data = _read_json(_path(PLAN_FILE, data_dir), {})
    if not isinstance(data, dict):
        data = {}

    rows = data.get("entries")
    if isinstance(rows, list) and rows:
        entries = [Entry.from_dict(r) for r in rows if isinstance(r, dict)]
    else:
        entries = default_entries()

    season_start = to_iso(data.get("season_start"))
    entries = seed_previous_season(entries, load_previous_season(data_dir))
    return derive_schedule(entries, season_start), season_start


def save_plan(entries: list[Entry], season_start: str, data_dir: Path | None = None) -> Path:
    """Save the working plan."""
    data = {"season_start": season_start, "entries": [e.to_dict() for e in entries]}
    return _write_json(_path(PLAN_FILE, data_dir), data)


# =============================================================================
# Previous Season
# =============================================================================


def load_previous_season(data_dir: Path | None = None) -> PreviousSeason:
    data = _read_json(_path(PREVIOUS_SEASON_FILE, data_dir), {})
    return PreviousSeason.from_dict(data if isinstance(data, dict) else {})


def save_previous_season(tables: PreviousSeason, data_dir: Path | None = None) -> Path:
    return _write_json(_path(PREVIOUS_SEASON_FILE, data_dir), tables.to_dict())


# =============================================================================
# Drafts
# =============================================================================


def load_drafts(data_dir: Path | None = None) -> Drafts:
    data = _read_json(_path(DRAFTS_FILE, data_dir), {})
    return drafts_from_dict(data if isinstance(data, dict) else {})


def save_drafts(drafts: Drafts, data_dir: Path | None = None) -> Path:
    return _write_json(_path(DRAFTS_FILE, data_dir), drafts_to_dict(drafts))


# =============================================================================
# Boundaries
# =============================================================================


def load_boundaries(data_dir: Path | None = None) -> FeatureSet:
    """Load the last imported boundaries (empty FeatureSet if none)."""
    data = _read_json(_path(BOUNDARIES_FILE, data_dir), None)
    if data is None:
        return FeatureSet()
    try:
        return parse_feature_collection(data)
    except BoundaryImportError:
        return FeatureSet()


def save_boundaries(feature_set: FeatureSet, data_dir: Path | None = None) -> Path:
    return _write_json(_path(BOUNDARIES_FILE, data_dir), feature_set.to_geojson())
