"""
Calendar arithmetic used by the antenatal and immunization registries.

The dashboard sends dates as ISO ``YYYY-MM-DD`` strings and expects the
same back, so the helpers accept either a :class:`datetime.date` or a
string and answer in kind.  Month numbers given to
:func:`create_valid_date` are 0-based, which is how the dashboard's date
pickers report them.
"""
from __future__ import annotations

import calendar
import datetime
import logging
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

DateLike = Union[datetime.date, str]


def parse_date(value) -> Optional[datetime.date]:
    """Return a ``date`` for a date, datetime or ISO string, else ``None``."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def create_valid_date(year: int, month: int, day: int) -> datetime.date:
    """Build a date, clamping an out-of-range month (0-based) or day."""
    month = min(11, max(0, int(month)))
    last_day = calendar.monthrange(int(year), month + 1)[1]
    day = min(last_day, max(1, int(day)))
    return datetime.date(int(year), month + 1, day)


def create_valid_date_string(year: int, month: int, day: int) -> str:
    return create_valid_date(year, month, day).isoformat()


def _shift(value: DateLike, delta):
    parsed = parse_date(value)
    if parsed is None:
        logger.warning("Unparseable date %r, returned unchanged", value)
        return value
    shifted = parsed + delta
    return shifted.isoformat() if isinstance(value, str) else shifted


def add_days(value: DateLike, days: int):
    return _shift(value, datetime.timedelta(days=int(days)))


def add_weeks(value: DateLike, weeks: int):
    return _shift(value, datetime.timedelta(weeks=int(weeks)))


def add_months(value: DateLike, months: int):
    # relativedelta clamps the day to the end of the target month
    return _shift(value, relativedelta(months=int(months)))


def weeks_between(start: DateLike, end: DateLike) -> int:
    """Whole weeks between two dates, ignoring order; 0 on bad input."""
    a, b = parse_date(start), parse_date(end)
    if a is None or b is None:
        return 0
    return abs((b - a).days) // 7


def age_in_years(dob: DateLike, on: Optional[DateLike] = None) -> Optional[int]:
    born = parse_date(dob)
    if born is None:
        return None
    today = parse_date(on) or datetime.date.today()
    return max(0, relativedelta(today, born).years)


def age_in_months(dob: DateLike, on: Optional[DateLike] = None) -> Optional[int]:
    born = parse_date(dob)
    if born is None:
        return None
    today = parse_date(on) or datetime.date.today()
    delta = relativedelta(today, born)
    return max(0, delta.years * 12 + delta.months)


def month_bounds(on: Optional[datetime.date] = None):
    """First day of the month of ``on`` and first day of the next month."""
    on = on or datetime.date.today()
    start = on.replace(day=1)
    return start, start + relativedelta(months=1)
