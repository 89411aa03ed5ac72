"""
Rotation entries and the list operations that edit them.

The rotation order IS the list order. Every operation returns a new list
and leaves its input untouched; derived fields (proposed ADA, start/end
date) are filled in afterwards by grazeplan.plan.schedule.
"""

import math
import uuid
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields, replace
from types import MappingProxyType

from grazeplan.core.config import settings
from grazeplan.plan.derive import NO_DATE, to_num

# Fields recomputed by derive_schedule - never set by hand
DERIVED_FIELDS = frozenset({"proposed_ada", "start_date", "end_date"})

# Nullable metrics carried over from imports
METRIC_FIELDS = ("prev_planned_ada", "prev_actual_ada", "est_native_ada", "est_perennial_ada")

# camelCase aliases accepted when loading stored plans and drafts
CAMEL_CASE_KEYS = {
    "herdSize": "herd_size",
    "grazingDays": "grazing_days",
    "prevPlannedADA": "prev_planned_ada",
    "prevActualADA": "prev_actual_ada",
    "estNativeADA": "est_native_ada",
    "estPerennialADA": "est_perennial_ada",
    "proposedADA": "proposed_ada",
    "startDate": "start_date",
    "endDate": "end_date",
}

# Built-in pasture list: (name, acres)
DEFAULT_PASTURES = [
    ("UA-E", 156),
    ("UA-G", 441),
    ("UA-F", 336),
    ("1", 782),
    ("8", 815),
    ("11C", 214),
    ("FS Ranger", 487),
    ("4", 670),
    ("11B", 212),
    ("UA-A", 549),
    ("UA-C", 365),
    ("UA-H", 453),
    ("UA-D", 357),
    ("140 Trap", 41),
    ("HQ", 25),
]


def new_id() -> str:
    """Generate a fresh opaque entry id."""
    return uuid.uuid4().hex


def normalize_name(value) -> str:
    """Case-fold and trim a pasture name for matching."""
    if value is None:
        return ""
    return str(value).strip().casefold()


def _to_int(value) -> int:
    return int(to_num(value))


def to_metric(value) -> float | None:
    if value is None or value == "":
        return None
    try:
        n = float(value)
    except (TypeError, ValueError):
        return None
    return n if math.isfinite(n) else None


def _to_text(value) -> str:
    return "" if value is None else str(value)


_COERCE = {
    "pasture": _to_text,
    "acreage": to_num,
    "herd_size": _to_int,
    "grazing_days": _to_int,
    "notes": _to_text,
    "proposed_ada": to_num,
    "start_date": _to_text,
    "end_date": _to_text,
    **{name: to_metric for name in METRIC_FIELDS},
}


@dataclass(frozen=True)
class Entry:
    """One pasture-rotation slot."""

    id: str = field(default_factory=new_id)
    pasture: str = ""
    acreage: float = 0.0
    herd_size: int = 0
    grazing_days: int = 0
    prev_planned_ada: float | None = None
    prev_actual_ada: float | None = None
    est_native_ada: float | None = None
    est_perennial_ada: float | None = None
    proposed_ada: float = 0.0
    start_date: str = NO_DATE
    end_date: str = NO_DATE
    notes: str = ""

    @property
    def key(self) -> str:
        """Normalized pasture name used to join imports and map features."""
        return normalize_name(self.pasture)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping) -> "Entry":
        """Build an entry from a stored dict.

        Accepts snake_case or camelCase keys. Unknown keys are ignored,
        missing numbers default to 0 and missing metrics to None.
        """
        values = {}
        for raw_key, value in data.items():
            name = CAMEL_CASE_KEYS.get(raw_key, raw_key)
            if name in _COERCE:
                values[name] = _COERCE[name](value)
        entry_id = data.get("id")
        if entry_id:
            values["id"] = str(entry_id)
        return cls(**values)


ENTRY_FIELDS = tuple(f.name for f in fields(Entry))


def new_entry(**overrides) -> Entry:
    """Create a blank entry, optionally with some fields set."""
    return Entry.from_dict(overrides) if overrides else Entry()


def default_entries(herd_size: int | None = None) -> list[Entry]:
    """Get the built-in pasture list with zero grazing days."""
    if herd_size is None:
        herd_size = settings.default_herd_size
    return [new_entry(pasture=name, acreage=acres, herd_size=herd_size) for name, acres in DEFAULT_PASTURES]


def clear_entries() -> list[Entry]:
    """Reset to a single blank entry."""
    return [Entry()]


# -----------------------------------------------------------------------------
# List Operations
# -----------------------------------------------------------------------------


def index_of(entries: list[Entry], entry_id: str) -> int:
    """Position of an entry by id, or -1."""
    for i, entry in enumerate(entries):
        if entry.id == entry_id:
            return i
    return -1


def find_entry(entries: list[Entry], key: str) -> Entry | None:
    """
    Find an entry by a user-supplied key.

    Tried in order:
    - exact id
    - "#N" for the N-th entry (1-based)
    - unique id prefix (4+ characters)
    - normalized pasture name (first match)
    """
    key = key.strip()
    for entry in entries:
        if entry.id == key:
            return entry

    if key.startswith("#") and key[1:].isdigit():
        position = int(key[1:])
        if 1 <= position <= len(entries):
            return entries[position - 1]
        return None

    if len(key) >= 4:
        matches = [e for e in entries if e.id.startswith(key)]
        if len(matches) == 1:
            return matches[0]

    wanted = normalize_name(key)
    for entry in entries:
        if entry.key == wanted:
            return entry
    return None


def add_entry(entries: list[Entry], pasture: str = "New Pasture", **values) -> list[Entry]:
    """Append a new entry to the end of the rotation."""
    return [*entries, new_entry(pasture=pasture, **values)]


def update_entry(entries: list[Entry], entry_id: str, **changes) -> list[Entry]:
    """
    Apply field edits to one entry.

    Unknown ids leave the list unchanged.

    Raises:
        ValueError: If changes include the id or a derived field
        TypeError: If changes name a field Entry does not have
    """
    forbidden = DERIVED_FIELDS.intersection(changes) | ({"id"} & changes.keys())
    if forbidden:
        raise ValueError(f"Cannot edit derived or identity fields: {', '.join(sorted(forbidden))}")
    unknown = set(changes) - set(ENTRY_FIELDS)
    if unknown:
        raise TypeError(f"Unknown entry fields: {', '.join(sorted(unknown))}")

    coerced = {name: _COERCE[name](value) for name, value in changes.items()}
    return [replace(e, **coerced) if e.id == entry_id else e for e in entries]


def delete_entry(entries: list[Entry], entry_id: str) -> list[Entry]:
    """Remove an entry."""
    return [e for e in entries if e.id != entry_id]


def duplicate_entry(entries: list[Entry], entry_id: str) -> list[Entry]:
    """Insert a copy (with a fresh id) right after the original."""
    idx = index_of(entries, entry_id)
    if idx < 0:
        return list(entries)
    copy = replace(entries[idx], id=new_id())
    return [*entries[: idx + 1], copy, *entries[idx + 1 :]]


def move_entry(entries: list[Entry], old_index: int, new_index: int) -> list[Entry]:
    """
    Move the entry at old_index so it ends up at new_index.

    Out-of-range indexes are clamped to the list bounds.
    """
    if not entries:
        return []
    last = len(entries) - 1
    old_index = min(max(old_index, 0), last)
    new_index = min(max(new_index, 0), last)
    result = list(entries)
    result.insert(new_index, result.pop(old_index))
    return result


# -----------------------------------------------------------------------------
# Previous-season Tables
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class PreviousSeason:
    """Previous-season planned/actual ADA keyed by normalized pasture name."""

    planned: Mapping[str, float] = field(default_factory=dict)
    actual: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "planned", MappingProxyType(dict(self.planned)))
        object.__setattr__(self, "actual", MappingProxyType(dict(self.actual)))

    def merged(
        self,
        planned: Mapping[str, float] | None = None,
        actual: Mapping[str, float] | None = None,
    ) -> "PreviousSeason":
        """Return new tables with the given values layered on top."""
        new_planned = dict(self.planned)
        new_actual = dict(self.actual)
        for name, value in (planned or {}).items():
            new_planned[normalize_name(name)] = value
        for name, value in (actual or {}).items():
            new_actual[normalize_name(name)] = value
        return PreviousSeason(planned=new_planned, actual=new_actual)

    def to_dict(self) -> dict:
        return {"planned": dict(self.planned), "actual": dict(self.actual)}

    @classmethod
    def from_dict(cls, data: Mapping) -> "PreviousSeason":
        tables = {}
        for name in ("planned", "actual"):
            values = {}
            table = data.get(name)
            if not isinstance(table, Mapping):
                table = {}
            for key, value in table.items():
                metric = to_metric(value)
                if metric is not None:
                    values[normalize_name(key)] = metric
            tables[name] = values
        return cls(**tables)


def seed_previous_season(entries: list[Entry], tables: PreviousSeason) -> list[Entry]:
    """Copy previous-season values onto entries with a matching name.

    Names missing from a table keep the entry's current value.
    """
    return [
        replace(
            e,
            prev_planned_ada=tables.planned.get(e.key, e.prev_planned_ada),
            prev_actual_ada=tables.actual.get(e.key, e.prev_actual_ada),
        )
        for e in entries
    ]


def snapshot_planned(entries: list[Entry], tables: PreviousSeason) -> PreviousSeason:
    """Record every named entry's proposed ADA as its previous-season plan."""
    planned = {e.pasture: e.proposed_ada for e in entries if e.key}
    return tables.merged(planned=planned)
