"""Schedulable item models - no I/O dependencies."""

import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo
from typing import ClassVar

from .clock import WEEKDAYS, company_zone, parse_instant, parse_local_date

logger = logging.getLogger(__name__)

_WEEKDAY_LOOKUP = {name.lower(): name for name in WEEKDAYS}
_WEEKDAY_LOOKUP.update({name[:3].lower(): name for name in WEEKDAYS})


def parse_string_list(value) -> list[str]:
    """
    Decode a list column that may arrive as a list, a JSON-encoded string or
    a comma-separated string. Anything unusable becomes an empty list.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(v).strip() for v in value if str(v).strip()]
    if not isinstance(value, str) or not value.strip():
        return []
    text = value.strip()
    if text.startswith("["):
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError:
            logger.debug(f"Ignoring malformed list column: {text!r}")
            return []
        if not isinstance(decoded, list):
            return []
        return [str(v).strip() for v in decoded if str(v).strip()]
    return [part.strip() for part in text.split(",") if part.strip()]


def normalize_weekdays(values: list[str]) -> list[str]:
    """Map weekday spellings ("sat", "SATURDAY") to canonical names, dropping unknowns."""
    days = []
    for value in values:
        name = _WEEKDAY_LOOKUP.get(value.strip().lower())
        if name and name not in days:
            days.append(name)
    return days


def normalize_exception_dates(values: list[str]) -> list[str]:
    """Reduce exception entries to YYYY-MM-DD strings, dropping malformed ones."""
    dates = []
    for value in values:
        parsed = parse_local_date(value)
        if parsed is not None:
            dates.append(parsed.isoformat())
    return dates


@dataclass
class Event:
    """A calendar event, optionally recurring."""

    kind: ClassVar[str] = "event"

    id: str
    title: str
    start: datetime | None
    end: datetime | None = None
    description: str | None = None
    recurrence_rule: str | None = None
    exceptions: list[str] = field(default_factory=list)
    all_day: bool = False
    is_active: bool = True
    venue_area: str | None = None
    tags: list[str] = field(default_factory=list)

    @property
    def is_recurring(self) -> bool:
        return bool(self.recurrence_rule and self.recurrence_rule.strip())

    def duration(self) -> timedelta | None:
        """Event duration, or None if no end time."""
        if not self.start or not self.end:
            return None
        return self.end - self.start

    @classmethod
    def from_api(cls, data: dict, tz: tzinfo | None = None) -> "Event":
        """Create Event from an admin API row."""
        tz = tz or company_zone()
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title") or "Untitled",
            start=parse_instant(data.get("startDateTime"), tz),
            end=parse_instant(data.get("endDateTime"), tz),
            description=data.get("description"),
            recurrence_rule=data.get("recurrenceRule") or None,
            exceptions=normalize_exception_dates(parse_string_list(data.get("exceptions"))),
            all_day=bool(data.get("isAllDay", False)),
            is_active=bool(data.get("isActive", True)),
            venue_area=data.get("venueArea"),
            tags=parse_string_list(data.get("tags")),
        )


@dataclass
class Special:
    """A food or drink special, either date-bound or weekly."""

    kind: ClassVar[str] = "special"

    id: str
    title: str
    type: str = "food"
    description: str | None = None
    price_notes: str | None = None
    applies_on: list[str] = field(default_factory=list)
    time_window: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool = True

    @property
    def is_weekly(self) -> bool:
        return bool(self.applies_on)

    @classmethod
    def from_api(cls, data: dict, tz: tzinfo | None = None) -> "Special":
        """Create Special from an admin API row."""
        special_type = (data.get("type") or "food").lower()
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title") or "Untitled",
            type=special_type if special_type in ("food", "drink") else "food",
            description=data.get("description"),
            price_notes=data.get("priceNotes"),
            applies_on=normalize_weekdays(parse_string_list(data.get("appliesOn"))),
            time_window=data.get("timeWindow"),
            start_date=parse_local_date(data.get("startDate")),
            end_date=parse_local_date(data.get("endDate")),
            is_active=bool(data.get("isActive", True)),
        )


@dataclass
class Announcement:
    """A site announcement with an optional publish window."""

    kind: ClassVar[str] = "announcement"

    id: str
    title: str
    body: str = ""
    publish_at: datetime | None = None
    expires_at: datetime | None = None
    is_published: bool = False

    @classmethod
    def from_api(cls, data: dict, tz: tzinfo | None = None) -> "Announcement":
        """Create Announcement from an admin API row."""
        tz = tz or company_zone()
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title") or "Untitled",
            body=data.get("body") or "",
            publish_at=parse_instant(data.get("publishAt"), tz),
            expires_at=parse_instant(data.get("expiresAt"), tz),
            is_published=bool(data.get("isPublished", False)),
        )


Item = Event | Special | Announcement

ITEM_TYPES: dict[str, type] = {
    Event.kind: Event,
    Special.kind: Special,
    Announcement.kind: Announcement,
}


def item_from_api(data: dict, tz: tzinfo | None = None) -> Item:
    """Create an item from a row tagged with its ``eventType``."""
    kind = data.get("eventType")
    item_type = ITEM_TYPES.get(kind)
    if item_type is None:
        raise ValueError(f"Unknown item type: {kind!r}")
    return item_type.from_api(data, tz)


def is_enabled(item: Item) -> bool:
    """Active flag for events/specials, published flag for announcements."""
    if isinstance(item, Announcement):
        return item.is_published
    return item.is_active


def items_from_rows(rows: list, item_type: type, tz: tzinfo | None = None) -> list:
    """Parse admin API rows of one type, skipping rows that are not objects."""
    items = []
    for row in rows or []:
        if not isinstance(row, dict):
            logger.warning(f"Skipping malformed {item_type.kind} row: {row!r}")
            continue
        items.append(item_type.from_api(row, tz))
    return items
