"""Data modules - saved plan, previous-season tables, drafts, boundaries."""

from grazeplan.data.drafts import (
    Draft,
    DraftNotFoundError,
    delete_draft,
    display_names,
    draft_year,
    load_draft,
    save_draft,
    sorted_years,
)
from grazeplan.data.store import (
    load_boundaries,
    load_drafts,
    load_plan,
    load_previous_season,
    save_boundaries,
    save_drafts,
    save_plan,
    save_previous_season,
)

__all__ = [
    "Draft",
    "DraftNotFoundError",
    "draft_year",
    "save_draft",
    "load_draft",
    "delete_draft",
    "display_names",
    "sorted_years",
    "load_plan",
    "save_plan",
    "load_previous_season",
    "save_previous_season",
    "load_drafts",
    "save_drafts",
    "load_boundaries",
    "save_boundaries",
]
