"""
Named plan snapshots ("drafts"), grouped by season year.

Drafts are append-only within a year (save order is display order) and
only go away through explicit deletion. Loading a draft hands back copies
of its entries with fresh ids so they never collide with the live plan.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import UTC, datetime

from grazeplan.plan.derive import to_iso, to_num
from grazeplan.plan.entries import Entry, new_id

Drafts = dict[str, list["Draft"]]


class DraftNotFoundError(Exception):
    """Raised when a draft id or number does not exist for a year."""

    pass


@dataclass(frozen=True)
class Draft:
    """One saved snapshot of (season start, entries)."""

    id: str
    name: str
    ts: int  # creation time, epoch milliseconds
    season_start: str
    entries: tuple[Entry, ...]

    @property
    def created_at(self) -> datetime:
        return datetime.fromtimestamp(self.ts / 1000, tz=UTC)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "ts": self.ts,
            "season_start": self.season_start,
            "entries": [e.to_dict() for e in self.entries],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Draft":
        rows = data.get("entries") or data.get("rows")
        if not isinstance(rows, list):
            rows = []
        return cls(
            id=str(data.get("id") or new_id()),
            name=str(data.get("name") or ""),
            ts=int(to_num(data.get("ts"))),
            season_start=to_iso(data.get("season_start") or data.get("startDate")),
            entries=tuple(Entry.from_dict(e) for e in rows if isinstance(e, Mapping)),
        )


def draft_year(season_start: str, now: datetime | None = None) -> str:
    """Year key for a draft: the season start's year, else the current year."""
    if season_start and re.match(r"^\d{4}", season_start):
        return season_start[:4]
    if now is None:
        now = datetime.now(UTC)
    return str(now.year)


def save_draft(
    drafts: Drafts,
    entries: list[Entry],
    season_start: str,
    now: datetime | None = None,
    name: str = "",
) -> tuple[Drafts, Draft]:
    """
    Append a snapshot of the plan to its year.

    Returns:
        Tuple of (new drafts mapping, the saved draft)
    """
    if now is None:
        now = datetime.now(UTC)
    draft = Draft(
        id=new_id(),
        name=name,
        ts=int(now.timestamp() * 1000),
        season_start=season_start,
        entries=tuple(entries),
    )
    year = draft_year(season_start, now)
    result = {y: list(items) for y, items in drafts.items()}
    result[year] = [*result.get(year, []), draft]
    return result, draft


def find_draft(drafts: Drafts, year: str, key: str) -> Draft:
    """
    Find a draft by id or by its 1-based number within the year.

    Raises:
        DraftNotFoundError: If nothing matches
    """
    items = drafts.get(str(year), [])
    for draft in items:
        if draft.id == key:
            return draft
    if key.isdigit() and 1 <= int(key) <= len(items):
        return items[int(key) - 1]
    raise DraftNotFoundError(f"No draft {key} in {year}")


def load_draft(drafts: Drafts, year: str, key: str) -> tuple[list[Entry], str]:
    """
    Get a draft's entries (with fresh ids) and season start.

    Raises:
        DraftNotFoundError: If nothing matches
    """
    draft = find_draft(drafts, year, key)
    entries = [replace(e, id=new_id()) for e in draft.entries]
    return entries, draft.season_start


def delete_draft(drafts: Drafts, year: str, key: str) -> Drafts:
    """Remove one draft. Years left without drafts are dropped."""
    target = find_draft(drafts, year, key)
    result = {}
    for y, items in drafts.items():
        kept = [d for d in items if d is not target] if y == str(year) else list(items)
        if kept:
            result[y] = kept
    return result


def display_names(drafts: Drafts, year: str) -> list[tuple[str, Draft]]:
    """Display names ("Draft 1".."Draft n") in save order."""
    return [(f"Draft {i}", d) for i, d in enumerate(drafts.get(str(year), []), 1)]


def sorted_years(drafts: Drafts) -> list[str]:
    """Year keys, newest first."""
    return sorted(drafts, key=lambda y: int(y) if y.isdigit() else 0, reverse=True)


def drafts_to_dict(drafts: Drafts) -> dict:
    return {year: [d.to_dict() for d in items] for year, items in drafts.items()}


def drafts_from_dict(data: dict) -> Drafts:
    result: Drafts = {}
    for year, items in (data or {}).items():
        if isinstance(items, list):
            result[str(year)] = [Draft.from_dict(d) for d in items if isinstance(d, dict)]
    return result
