"""
Sequential grazing schedule.

Each entry's window starts the day after the previous entry's window ends,
beginning at the season start:

    start[0] = season_start
    end[i]   = start[i] + max(days[i] - 1, 0)
    start[i+1] = end[i] + 1

A zero-day entry still occupies one nominal day. A missing or invalid
season start leaves every entry without dates.
"""

from dataclasses import dataclass, replace

from grazeplan.plan import entries as ops
from grazeplan.plan.derive import NO_DATE, add_days, overlaps_window, stocking_density, to_iso, to_num
from grazeplan.plan.entries import Entry


@dataclass(frozen=True)
class PlanTotals:
    """Totals row for a plan."""

    total_ada: float
    total_days: int
    summer_count: int


def derive_schedule(entries: list[Entry], season_start) -> list[Entry]:
    """
    Fill in proposed ADA and start/end dates for every entry.

    Pure: the result depends only on the entry order, each entry's
    acreage/herd size/grazing days and the season start, so running it
    twice gives the same list.

    Args:
        entries: Entries in rotation order
        season_start: Season start as a date or ISO string ("" for none)

    Returns:
        New list of entries with derived fields set
    """
    cursor = to_iso(season_start)
    result = []

    for entry in entries:
        proposed = stocking_density(entry.grazing_days, entry.herd_size, entry.acreage)

        if cursor == NO_DATE:
            result.append(replace(entry, proposed_ada=proposed, start_date=NO_DATE, end_date=NO_DATE))
            continue

        days = max(0, int(to_num(entry.grazing_days)))
        start = cursor
        end = add_days(start, days - 1) if days > 0 else start
        cursor = add_days(end, 1)

        result.append(replace(entry, proposed_ada=proposed, start_date=start, end_date=end))

    return result


def derivation_key(entries: list[Entry], season_start) -> tuple:
    """
    The subset of plan state that feeds derive_schedule.

    Pasture names, notes and imported metrics are left out, so editing
    them never triggers a recompute.
    """
    rows = tuple((e.id, e.acreage, e.herd_size, e.grazing_days) for e in entries)
    return (to_iso(season_start), rows)


def in_summer(entry: Entry) -> bool:
    """Check if an entry's grazing window touches the summer window."""
    return overlaps_window(entry.start_date, entry.end_date)


def summarize(entries: list[Entry]) -> PlanTotals:
    """Sum proposed ADA and grazing days across the plan."""
    total_ada = sum(to_num(e.proposed_ada) for e in entries)
    total_days = sum(max(0, int(to_num(e.grazing_days))) for e in entries)
    return PlanTotals(
        total_ada=round(total_ada, 2),
        total_days=total_days,
        summer_count=sum(1 for e in entries if in_summer(e)),
    )


class RotationPlan:
    """
    Working entry list plus season start.

    Every mutation goes through plan.entries and then re-derives the
    schedule, but only when the derivation-relevant fields changed.
    """

    def __init__(self, entries: list[Entry] | None = None, season_start: str = NO_DATE):
        self._entries: list[Entry] = list(entries or [])
        self._season_start = to_iso(season_start)
        self._key: tuple | None = None
        self.recompute_count = 0
        self._recompute()

    @property
    def entries(self) -> list[Entry]:
        return list(self._entries)

    @property
    def season_start(self) -> str:
        return self._season_start

    def _recompute(self) -> None:
        key = derivation_key(self._entries, self._season_start)
        if key == self._key:
            return
        self._entries = derive_schedule(self._entries, self._season_start)
        self._key = key
        self.recompute_count += 1

    def _apply(self, entries: list[Entry]) -> list[Entry]:
        self._entries = list(entries)
        self._recompute()
        return self.entries

    def set_season_start(self, season_start) -> str:
        self._season_start = to_iso(season_start)
        self._recompute()
        return self._season_start

    def replace(self, entries: list[Entry], season_start=None) -> list[Entry]:
        """Swap in a whole new entry list (and optionally season start)."""
        if season_start is not None:
            self._season_start = to_iso(season_start)
        self._key = None
        return self._apply(entries)

    def add(self, pasture: str = "New Pasture", **values) -> Entry:
        self._apply(ops.add_entry(self._entries, pasture, **values))
        return self._entries[-1]

    def update(self, entry_id: str, **changes) -> list[Entry]:
        return self._apply(ops.update_entry(self._entries, entry_id, **changes))

    def delete(self, entry_id: str) -> list[Entry]:
        return self._apply(ops.delete_entry(self._entries, entry_id))

    def duplicate(self, entry_id: str) -> list[Entry]:
        return self._apply(ops.duplicate_entry(self._entries, entry_id))

    def move(self, old_index: int, new_index: int) -> list[Entry]:
        return self._apply(ops.move_entry(self._entries, old_index, new_index))

    def clear(self) -> list[Entry]:
        return self._apply(ops.clear_entries())

    def find(self, key: str) -> Entry | None:
        return ops.find_entry(self._entries, key)

    def totals(self) -> PlanTotals:
        return summarize(self._entries)
