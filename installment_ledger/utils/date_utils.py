"""Calendar month utilities"""

import re
from datetime import date, datetime
from typing import List

from installment_ledger.domain.exceptions import InvalidMonthError

_MONTH_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


def parse_month(value: str | date) -> date:
    """
    Resolve a month reference to the first calendar day of that month.

    Accepts a zero-padded "YYYY-MM" string or a date/datetime (the day is
    dropped). Anything else raises InvalidMonthError.
    """
    if isinstance(value, datetime):
        return value.date().replace(day=1)
    if isinstance(value, date):
        return value.replace(day=1)
    if not isinstance(value, str):
        raise InvalidMonthError(f"Month must be a 'YYYY-MM' string, got {type(value).__name__}")

    match = _MONTH_PATTERN.match(value.strip())
    if not match:
        raise InvalidMonthError(f"Invalid month {value!r}, expected 'YYYY-MM'")

    year = int(match.group(1))
    if year < 1:
        raise InvalidMonthError(f"Invalid month {value!r}, year out of range")
    return date(year, int(match.group(2)), 1)


def format_month(value: date) -> str:
    """Format a date as its "YYYY-MM" month key"""
    return f"{value.year:04d}-{value.month:02d}"


def current_month(today: date | None = None) -> str:
    """Month key for today (or the given day)"""
    return format_month(today or date.today())


def month_index(value: date) -> int:
    """Absolute month number, used for month offsets"""
    return value.year * 12 + (value.month - 1)


def month_diff(later: date, earlier: date) -> int:
    """Whole calendar months from `earlier` to `later` (days ignored)"""
    return month_index(later) - month_index(earlier)


def add_months(value: date, months: int) -> date:
    """First day of the month `months` away from `value`"""
    index = month_index(value) + months
    try:
        return date(index // 12, index % 12 + 1, 1)
    except ValueError as e:
        raise InvalidMonthError(f"Month {months:+d} from {format_month(value)} is out of range") from e


def next_month(month: str | date) -> str:
    return format_month(add_months(parse_month(month), 1))


def previous_month(month: str | date) -> str:
    return format_month(add_months(parse_month(month), -1))


def future_months(start: str | date, count: int = 12) -> List[str]:
    """List `count` consecutive month keys beginning with `start`"""
    first = parse_month(start)
    return [format_month(add_months(first, i)) for i in range(count)]
