"""Pure calendar helpers - no I/O dependencies.

Every derived value is computed relative to an explicit ``today`` so the
same card can land in a different column tomorrow.
"""

import re
from datetime import date

WEEKDAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")
MONTHS = ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec")

_YEAR_FIRST = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_DAY_FIRST = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")


def parse_date_shape(text: str) -> date | None:
    """
    Parse a date tag value.

    Accepts ``YYYY-M-D`` / ``YYYY-MM-DD`` and the day-first ``DD-MM-YYYY``.
    Returns None when the text does not have a date shape or names a day
    that does not exist (``2025-02-30``).
    """
    m = _YEAR_FIRST.match(text)
    if m:
        year, month, day = (int(g) for g in m.groups())
    else:
        m = _DAY_FIRST.match(text)
        if not m:
            return None
        day, month, year = (int(g) for g in m.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def day_offset(target: date, today: date) -> int:
    """Signed calendar-day distance from today (negative if in the past)."""
    return (target - today).days


def weekday_num(target: date) -> int:
    """ISO weekday, Monday=1 ... Sunday=7."""
    return target.isoweekday()


def weekday_abbrev(target: date) -> str:
    return WEEKDAYS[target.weekday()]


def month_abbrev(target: date) -> str:
    return MONTHS[target.month - 1]


def weekday_index(abbrev: str) -> int | None:
    """ISO number for a weekday abbreviation (case-insensitive)."""
    try:
        return WEEKDAYS.index(abbrev.lower()) + 1
    except ValueError:
        return None


def month_index(abbrev: str) -> int | None:
    """Month number 1-12 for a month abbreviation (case-insensitive)."""
    try:
        return MONTHS.index(abbrev.lower()) + 1
    except ValueError:
        return None
