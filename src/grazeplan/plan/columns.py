"""
Column rules for tabular imports.

Spreadsheets exported from different tools name their columns differently
("Pasture", "Paddock Name", "Unit #", "Est. Native ADA", ...). Each logical
field has an ordered list of regex candidates matched against normalized
header names; the first candidate that matches any header wins, and the
field falls back to a default column name when nothing matches.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class ColumnRule:
    """How to find one logical field among a file's headers."""

    field: str
    patterns: tuple[str, ...]
    default: str

    def match(self, headers: Iterable[str]) -> str:
        """Return the header this rule resolves to.

        Patterns are tried in priority order, each against every header, so
        an earlier pattern wins over an earlier column.
        """
        normalized = [(h, normalize_header(h)) for h in headers]
        for pattern in self.patterns:
            regex = re.compile(pattern)
            for header, norm in normalized:
                if regex.search(norm):
                    return header
        return self.default


def normalize_header(header) -> str:
    """Lowercase and trim a header name."""
    return str(header or "").strip().lower()


PASTURE_RULE = ColumnRule("pasture", (r"pasture", r"paddock", r"unit"), "Pasture")

ESTIMATE_RULES = (
    PASTURE_RULE,
    ColumnRule("est_native_ada", (r"est.*native.*ada", r"native.*ada"), "EstNativeADA"),
    ColumnRule("est_perennial_ada", (r"est.*per.*ada", r"perennial.*ada"), "EstPerennialADA"),
)

PREVIOUS_SEASON_RULES = (
    PASTURE_RULE,
    ColumnRule("prev_planned_ada", (r"prev.*plan.*ada", r"plan.*ada"), "PrevPlannedADA"),
    ColumnRule("prev_actual_ada", (r"prev.*act.*ada", r"actual.*ada"), "PrevActualADA"),
)


def resolve_columns(headers: Iterable[str], rules: Iterable[ColumnRule]) -> dict[str, str]:
    """Map each rule's field to the header it resolves to.

    Args:
        headers: Column names from the file, in file order
        rules: Column rules to resolve

    Returns:
        Dict of field name -> header name (or the rule's default)
    """
    headers = list(headers)
    return {rule.field: rule.match(headers) for rule in rules}
