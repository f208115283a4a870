"""Display formatting for items."""

from datetime import datetime, tzinfo

from .core.clock import WEEKDAYS, as_aware, far_future
from .core.items import Announcement, Event, Item, Special
from .core.listing import next_date
from .core.recurrence import ResolverSettings, describe_pattern
from .core.status import classify_status, ordered_statuses

WEEKDAY_ABBREVIATIONS = [d[:3] for d in WEEKDAYS]


def format_days(days: list[str]) -> str:
    """Summarise a weekday set: "Every day", "Weekdays", "Weekends" or "Mon, Wed"."""
    known = sorted({d for d in days if d in WEEKDAYS}, key=WEEKDAYS.index)
    if not known:
        return "No days set"
    if len(known) == 7:
        return "Every day"
    if known == WEEKDAYS[:5]:
        return "Weekdays"
    if known == WEEKDAYS[5:]:
        return "Weekends"
    return ", ".join(WEEKDAY_ABBREVIATIONS[WEEKDAYS.index(d)] for d in known)


def _is_sentinel(when: datetime, now: datetime, tz: tzinfo, settings: ResolverSettings | None) -> bool:
    years = (settings or ResolverSettings()).far_future_years
    return when >= far_future(as_aware(now, tz), years)


def format_when(
    item: Item,
    when: datetime,
    now: datetime,
    tz: tzinfo,
    settings: ResolverSettings | None = None,
) -> str:
    """Short date text for an item's next-occurrence date."""
    if isinstance(item, Special) and item.is_weekly and item.start_date is None:
        days = format_days(item.applies_on)
        return days if _is_sentinel(when, now, tz, settings) else f"{days} (next {when.astimezone(tz):%a %b %d})"
    if _is_sentinel(when, now, tz, settings) or when.year < 1971:
        return "No date"
    local = when.astimezone(tz)
    if isinstance(item, Event) and not item.all_day:
        return local.strftime("%a %b %d %H:%M")
    return local.strftime("%a %b %d")


def format_item_line(
    item: Item,
    now: datetime,
    tz: tzinfo,
    settings: ResolverSettings | None = None,
) -> str:
    """
    One-line rendering of an item.

    Format: "[kind] title - when (Status, Status)" plus the recurrence
    pattern for recurring events.
    """
    when = next_date(item, now, tz, settings)
    labels = ", ".join(s.label for s in ordered_statuses(classify_status(item, now, tz)))
    line = f"[{item.kind:12}] {item.title} - {format_when(item, when, now, tz, settings)} ({labels})"
    if isinstance(item, Event) and item.is_recurring:
        pattern = describe_pattern(item.recurrence_rule) or "Recurring"
        line += f" [{pattern}]"
    return line


def item_to_dict(
    item: Item,
    now: datetime,
    tz: tzinfo,
    settings: ResolverSettings | None = None,
) -> dict:
    """JSON-serialisable view of an item with its derived fields."""
    when = next_date(item, now, tz, settings)
    data = {
        "kind": item.kind,
        "id": item.id,
        "title": item.title,
        "statuses": [s.value for s in ordered_statuses(classify_status(item, now, tz))],
        "next": when.isoformat(),
    }
    if isinstance(item, Event):
        data["start"] = item.start.isoformat() if item.start else None
        data["end"] = item.end.isoformat() if item.end else None
        data["recurrence_rule"] = item.recurrence_rule
        data["pattern"] = describe_pattern(item.recurrence_rule)
    elif isinstance(item, Special):
        data["type"] = item.type
        data["applies_on"] = list(item.applies_on)
        data["start_date"] = item.start_date.isoformat() if item.start_date else None
        data["end_date"] = item.end_date.isoformat() if item.end_date else None
    elif isinstance(item, Announcement):
        data["publish_at"] = item.publish_at.isoformat() if item.publish_at else None
        data["expires_at"] = item.expires_at.isoformat() if item.expires_at else None
    return data
