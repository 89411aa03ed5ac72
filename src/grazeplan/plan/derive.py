"""
Pure numeric helpers behind the grazing schedule.

- Stocking density (animal-days per acre) from duration, herd size and area
- Canonical calendar-date strings with an explicit "no date" sentinel
- Day offsets and the summer-window overlap test

None of these raise on bad input: garbage numbers collapse to 0 and
unparseable dates collapse to NO_DATE.
"""

import math
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Context, Decimal

# Area floor so a zero-acre pasture never divides by zero
MIN_AREA = 0.000001

# Canonical "no date" value (an empty calendar-date string)
NO_DATE = ""

# Half-up to the cent on the exact binary value; precision covers any finite float
CENT = Decimal("0.01")
_CENT_ROUNDING = Context(prec=400, rounding=ROUND_HALF_UP)

DATE_FORMAT = "%Y-%m-%d"

# Recurring summer window (month, day), inclusive on both ends
SUMMER_WINDOW_START = (7, 15)
SUMMER_WINDOW_END = (9, 15)


def to_num(value) -> float:
    """Coerce a cell or field value to a finite number, defaulting to 0."""
    if value is None or value == "":
        return 0.0
    try:
        n = float(value)
    except (TypeError, ValueError):
        return 0.0
    return n if math.isfinite(n) else 0.0


def stocking_density(days, herd_size, area) -> float:
    """
    Calculate proposed stocking density in animal-days per acre.

    Days and herd size are clamped to >= 0 and area to MIN_AREA.

    Args:
        days: Planned grazing days
        herd_size: Number of animals
        area: Pasture area in acres

    Returns:
        (days * herd_size) / area, rounded half-up to 2 decimal places
    """
    g = max(0.0, to_num(days))
    h = max(0.0, to_num(herd_size))
    a = max(MIN_AREA, to_num(area))
    return float(Decimal((g * h) / a).quantize(CENT, context=_CENT_ROUNDING))


# -----------------------------------------------------------------------------
# Dates
# -----------------------------------------------------------------------------


def parse_date(value) -> date | None:
    """Parse a date, datetime or ISO string. Returns None if invalid."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def format_date(d: date | None) -> str:
    """Format a date as YYYY-MM-DD, or NO_DATE for None."""
    if d is None:
        return NO_DATE
    return d.strftime(DATE_FORMAT)


def to_iso(value) -> str:
    """Normalize any accepted date input to its canonical string."""
    return format_date(parse_date(value))


def add_days(iso: str, days: int) -> str:
    """Offset a canonical date string by a number of days.

    NO_DATE (or anything unparseable) comes back as NO_DATE.
    """
    d = parse_date(iso)
    if d is None:
        return NO_DATE
    try:
        return format_date(d + timedelta(days=int(days)))
    except OverflowError:
        return NO_DATE


def summer_window(year: int) -> tuple[date, date]:
    """Get the (start, end) of the summer window for a year."""
    return (date(year, *SUMMER_WINDOW_START), date(year, *SUMMER_WINDOW_END))


def overlaps_window(start, end) -> bool:
    """
    Check if a closed date interval touches the summer window in any year.

    Every year from start.year to end.year is tested, so a span crossing
    New Year is checked against both summers.

    Returns:
        True if [start, end] intersects Jul 15 - Sep 15 of some year.
        False if either end is not a valid date.
    """
    s = parse_date(start)
    e = parse_date(end)
    if s is None or e is None:
        return False
    if e < s:
        s, e = e, s

    for year in range(s.year, e.year + 1):
        window_start, window_end = summer_window(year)
        if s <= window_end and window_start <= e:
            return True
    return False
