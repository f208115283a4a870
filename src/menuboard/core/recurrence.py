"""Next-occurrence resolution for schedulable items - no I/O dependencies."""

import logging
import re
from dataclasses import dataclass, replace
from datetime import datetime, timezone, tzinfo

from dateutil.rrule import rrulestr

from .clock import (
    as_aware,
    date_string,
    days_from,
    end_of_day,
    far_future,
    local_date,
    start_of_day,
    weekday_name,
)
from .items import Announcement, Event, Item, Special

logger = logging.getLogger(__name__)

DEFAULT_SCAN_LIMIT = 10
DEFAULT_WEEKDAY_SCAN_DAYS = 14
DEFAULT_FAR_FUTURE_YEARS = 100

_UNTIL = re.compile(r"UNTIL=(\d{8})(T\d{6})?(Z?)", re.IGNORECASE)


class RecurrenceError(ValueError):
    """Raised when a recurrence rule cannot be parsed or evaluated."""


@dataclass(frozen=True)
class ResolverSettings:
    """Tunables for next-occurrence resolution."""

    scan_limit: int = DEFAULT_SCAN_LIMIT
    weekday_scan_days: int = DEFAULT_WEEKDAY_SCAN_DAYS
    far_future_years: int = DEFAULT_FAR_FUTURE_YEARS
    undated_announcements: str = "last"


def _rule_body(text: str) -> str:
    """Pick the RRULE line out of rule text, dropping any DTSTART/EXDATE lines."""
    for line in text.replace("\\n", "\n").splitlines():
        line = line.strip()
        if line.upper().startswith("RRULE:"):
            return line[len("RRULE:"):]
        if "FREQ=" in line.upper() and ":" not in line:
            return line
    raise RecurrenceError(f"No RRULE found in {text!r}")


def _utc_until(body: str, tz: tzinfo) -> str:
    """
    Rewrite a floating UNTIL as UTC.

    dateutil requires UNTIL in UTC once DTSTART is timezone-aware; a
    date-only UNTIL covers the whole local day.
    """

    def _convert(match: re.Match) -> str:
        day, clock, zulu = match.groups()
        if zulu:
            return match.group(0)
        if clock:
            local = datetime.strptime(day + clock, "%Y%m%dT%H%M%S").replace(tzinfo=tz)
        else:
            local = end_of_day(datetime.strptime(day, "%Y%m%d").date(), tz).replace(microsecond=0)
        return "UNTIL=" + local.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")

    return _UNTIL.sub(_convert, body)


def build_rule(event: Event, tz: tzinfo):
    """
    Parse an event's recurrence rule anchored at the event start.

    The event start always wins over any DTSTART embedded in the rule text.
    Occurrences are generated in company-local wall time so a 7pm weekly
    event stays at 7pm across DST changes.

    Raises:
        RecurrenceError: if the event has no start, no rule, or an invalid rule.
    """
    if not event.is_recurring:
        raise RecurrenceError("Event has no recurrence rule")
    if event.start is None:
        raise RecurrenceError("Recurring event has no start")

    dtstart = as_aware(event.start, tz).astimezone(tz)
    try:
        body = _utc_until(_rule_body(event.recurrence_rule), tz)
        return rrulestr(body, dtstart=dtstart)
    except RecurrenceError:
        raise
    except (ValueError, TypeError, KeyError, OverflowError) as e:
        raise RecurrenceError(f"Invalid recurrence rule {event.recurrence_rule!r}: {e}") from e


def next_occurrence(
    event: Event,
    now: datetime,
    tz: tzinfo,
    scan_limit: int = DEFAULT_SCAN_LIMIT,
) -> datetime | None:
    """
    First occurrence strictly after `now` that is not an exception date.

    At most `scan_limit` excepted candidates are skipped. Returns None if the
    rule is exhausted or the bound is hit.

    Raises:
        RecurrenceError: if the rule cannot be parsed or evaluated.
    """
    rule = build_rule(event, tz)
    now = as_aware(now, tz)
    exceptions = set(event.exceptions)

    try:
        candidate = rule.after(now, inc=False)
        skipped = 0
        while candidate is not None:
            if date_string(candidate, tz) not in exceptions:
                return candidate
            skipped += 1
            if skipped >= scan_limit:
                return None
            candidate = rule.after(candidate, inc=False)
    except (ValueError, TypeError, OverflowError) as e:
        raise RecurrenceError(f"Failed to evaluate {event.recurrence_rule!r}: {e}") from e

    return None


def expand_occurrences(
    event: Event,
    range_start: datetime,
    range_end: datetime,
    tz: tzinfo,
) -> list[Event]:
    """
    Concrete occurrences of an event that fall inside [range_start, range_end].

    Recurring events yield one non-recurring copy per occurrence, keeping the
    original duration and skipping exception dates. A one-off event is
    returned as-is when it overlaps the window. Unparsable rules yield nothing.
    """
    if event.start is None:
        return []
    range_start = as_aware(range_start, tz)
    range_end = as_aware(range_end, tz)
    start = as_aware(event.start, tz)

    if not event.is_recurring:
        event_end = as_aware(event.end, tz) if event.end else start
        if start <= range_end and event_end >= range_start:
            return [event]
        return []

    try:
        rule = build_rule(event, tz)
        search_start = max(start, range_start)
        occurrences = rule.between(search_start, range_end, inc=True)
    except (RecurrenceError, ValueError, TypeError, OverflowError) as e:
        logger.debug(f"Skipping event {event.id} ({event.title}): {e}")
        return []

    exceptions = set(event.exceptions)
    duration = event.duration()
    return [
        replace(
            event,
            start=occurrence,
            end=occurrence + duration if duration is not None else None,
            recurrence_rule=None,
            exceptions=[],
        )
        for occurrence in occurrences
        if date_string(occurrence, tz) not in exceptions
    ]


# ============== Resolver ==============


def _resolve_event(event: Event, now: datetime, tz: tzinfo, sentinel: datetime, scan_limit: int) -> datetime:
    if not event.is_recurring:
        if event.start is None:
            return sentinel
        return as_aware(event.start, tz)
    try:
        occurrence = next_occurrence(event, now, tz, scan_limit)
    except RecurrenceError as e:
        logger.debug(f"Event {event.id} ({event.title}) sorts last: {e}")
        return sentinel
    return occurrence if occurrence is not None else sentinel


def _resolve_special(special: Special, now: datetime, tz: tzinfo, sentinel: datetime, scan_days: int) -> datetime:
    if special.start_date is not None:
        last_day = special.end_date or special.start_date
        if start_of_day(special.start_date, tz) <= now <= end_of_day(last_day, tz):
            return now
        if start_of_day(special.start_date, tz) > now:
            return start_of_day(special.start_date, tz)
        return start_of_day(last_day, tz)

    if special.applies_on:
        for day in days_from(local_date(now, tz), scan_days):
            if weekday_name(day) not in special.applies_on:
                continue
            if special.end_date is not None and day > special.end_date:
                return sentinel
            return start_of_day(day, tz)

    return sentinel


def _resolve_announcement(
    announcement: Announcement,
    tz: tzinfo,
    sentinel: datetime,
    undated_first: bool,
) -> datetime:
    if announcement.publish_at is not None:
        return as_aware(announcement.publish_at, tz)
    if undated_first:
        return datetime.fromtimestamp(0, tz=timezone.utc)
    return sentinel


def resolve_next_occurrence(
    item: Item,
    now: datetime,
    tz: tzinfo,
    scan_limit: int = DEFAULT_SCAN_LIMIT,
    weekday_scan_days: int = DEFAULT_WEEKDAY_SCAN_DAYS,
    far_future_years: int = DEFAULT_FAR_FUTURE_YEARS,
    undated_announcements: str = "last",
) -> datetime:
    """
    When an item is next relevant, for sorting only.

    Pure function - no I/O. Never raises for bad item data: anything without
    a determinable future occurrence maps to a far-future sentinel so it
    sorts after everything that has one.

    Args:
        item: Event, Special or Announcement snapshot
        now: Current instant (naive values are taken as company-local)
        tz: Company timezone
        scan_limit: Max excepted occurrences skipped for recurring events
        weekday_scan_days: How many days ahead to look for weekly specials
        far_future_years: Distance of the sentinel from `now`
        undated_announcements: "last" (sentinel) or "first" (epoch)

    Returns:
        An aware datetime
    """
    now = as_aware(now, tz)
    sentinel = far_future(now, far_future_years)

    if isinstance(item, Event):
        return _resolve_event(item, now, tz, sentinel, scan_limit)
    if isinstance(item, Special):
        return _resolve_special(item, now, tz, sentinel, weekday_scan_days)
    if isinstance(item, Announcement):
        return _resolve_announcement(item, tz, sentinel, undated_announcements == "first")
    return sentinel


# ============== Pattern labels ==============

_DAY_NAMES = {
    "MO": "Monday",
    "TU": "Tuesday",
    "WE": "Wednesday",
    "TH": "Thursday",
    "FR": "Friday",
    "SA": "Saturday",
    "SU": "Sunday",
}
_ORDINALS = {1: "1st", 2: "2nd", 3: "3rd", 4: "4th", 5: "5th", -1: "last"}
_NTH_DAY = re.compile(r"^([+-]?\d)?([A-Z]{2})$")


def describe_pattern(rule_text: str | None) -> str | None:
    """
    Human-readable label for common recurrence rules.

    Returns None for rules that are invalid or too unusual to summarise.
    """
    if not rule_text:
        return None
    try:
        body = _rule_body(rule_text)
        # Validate with dateutil before summarising the parts; an aware
        # anchor so UTC UNTIL values are accepted
        rrulestr(_utc_until(body, timezone.utc), dtstart=datetime(2000, 1, 1, tzinfo=timezone.utc))
    except (ValueError, TypeError, OverflowError):
        return None

    parts = dict(p.split("=", 1) for p in body.upper().split(";") if "=" in p)
    freq = parts.get("FREQ")
    interval = int(parts.get("INTERVAL", "1") or 1)
    byday = [d.strip() for d in parts.get("BYDAY", "").split(",") if d.strip()]

    if freq == "DAILY":
        return "Daily" if interval == 1 else f"Every {interval} days"

    if freq == "WEEKLY":
        prefix = "Weekly" if interval == 1 else f"Every {interval} weeks"
        days = [_DAY_NAMES[d] for d in byday if d in _DAY_NAMES]
        return f"{prefix} on {', '.join(days)}" if days else prefix

    if freq == "MONTHLY":
        prefix = "Monthly" if interval == 1 else f"Every {interval} months"
        if "BYMONTHDAY" in parts:
            return f"{prefix} on day {parts['BYMONTHDAY']}"
        if len(byday) == 1:
            match = _NTH_DAY.match(byday[0])
            if match and match.group(2) in _DAY_NAMES:
                nth = match.group(1) or parts.get("BYSETPOS")
                day = _DAY_NAMES[match.group(2)]
                if nth and int(nth) in _ORDINALS:
                    return f"{prefix} on the {_ORDINALS[int(nth)]} {day}"
        return prefix

    if freq == "YEARLY":
        return "Yearly" if interval == 1 else f"Every {interval} years"

    return None


def upcoming_occurrences(
    events: list[Event],
    now: datetime,
    tz: tzinfo,
    days: int = 7,
) -> list[Event]:
    """
    All event occurrences from the start of today through the next `days`
    calendar days, one-off and recurring alike, sorted by start.

    Pure function - no I/O.
    """
    now = as_aware(now, tz)
    first_day = local_date(now, tz)
    window = days_from(first_day, max(days, 1))
    range_start = start_of_day(window[0], tz)
    range_end = end_of_day(window[-1], tz)

    occurrences = []
    for event in events:
        occurrences.extend(expand_occurrences(event, range_start, range_end, tz))
    return sorted(occurrences, key=lambda e: as_aware(e.start, tz))
