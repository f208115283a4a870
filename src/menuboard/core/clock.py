"""Company-timezone date handling - no I/O dependencies.

All "is this today / is this past" decisions are made in one fixed company
timezone (Mountain Time by default), never in the host's local zone.
"""

import re
from datetime import MAXYEAR, date, datetime, time, timedelta, tzinfo
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "America/Denver"

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

_DATE_PREFIX = re.compile(r"^\s*(\d{4}-\d{2}-\d{2})")


def company_zone(name: str = DEFAULT_TIMEZONE) -> ZoneInfo:
    """Load the company timezone."""
    return ZoneInfo(name)


def local_date(instant: datetime, tz: tzinfo) -> date:
    """Calendar date of an instant as seen in the company timezone."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=tz)
    return instant.astimezone(tz).date()


def date_string(instant: datetime, tz: tzinfo) -> str:
    """YYYY-MM-DD of an instant in the company timezone."""
    return local_date(instant, tz).isoformat()


def today(now: datetime, tz: tzinfo) -> date:
    return local_date(now, tz)


def start_of_day(d: date, tz: tzinfo) -> datetime:
    """Local midnight at the start of a calendar date."""
    return datetime.combine(d, time.min, tzinfo=tz)


def end_of_day(d: date, tz: tzinfo) -> datetime:
    """Last representable local instant of a calendar date."""
    return datetime.combine(d, time.max, tzinfo=tz)


def weekday_name(d: date) -> str:
    return WEEKDAYS[d.weekday()]


def parse_local_date(value: str | date | None) -> date | None:
    """
    Extract a calendar date from a stored date field.

    Date-only columns come back from the admin API as either YYYY-MM-DD or a
    full ISO string at UTC midnight; only the leading date part is meaningful,
    so it is taken literally rather than converted between zones.
    Returns None for missing or malformed values.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    match = _DATE_PREFIX.match(value)
    if not match:
        return None
    try:
        return date.fromisoformat(match.group(1))
    except ValueError:
        return None


def parse_instant(value: str | datetime | None, tz: tzinfo) -> datetime | None:
    """
    Parse an ISO-8601 instant into an aware datetime.

    Naive values are taken as company-local wall time. Returns None for
    missing or malformed values.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz)
    return dt


def far_future(now: datetime, years: int = 100) -> datetime:
    """
    Sentinel instant for "no determinable future occurrence".

    Clamped to the last representable instant when `years` would pass the
    end of the calendar.
    """
    if now.year + years > MAXYEAR:
        return datetime.max.replace(tzinfo=now.tzinfo)
    try:
        return now.replace(year=now.year + years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return now.replace(year=now.year + years, day=28)


def days_from(start: date, count: int) -> list[date]:
    """`count` consecutive calendar dates beginning at `start`."""
    return [start + timedelta(days=i) for i in range(count)]


def as_aware(instant: datetime, tz: tzinfo) -> datetime:
    """Attach the company timezone to a naive instant."""
    return instant if instant.tzinfo is not None else instant.replace(tzinfo=tz)
