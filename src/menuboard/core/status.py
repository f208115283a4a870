"""Status classification for schedulable items - no I/O dependencies."""

from datetime import datetime, tzinfo
from enum import Enum

from .clock import as_aware, end_of_day, start_of_day
from .items import Announcement, Event, Item, Special


class Status(str, Enum):
    """Derived item status, never stored."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    PUBLISHED = "published"
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    PAST = "past"
    EXPIRED = "expired"

    @property
    def label(self) -> str:
        return self.value.capitalize()


# Lower sorts first
PRIORITY_ACTIVE = 0
PRIORITY_SCHEDULED = 1
PRIORITY_PAST = 2
PRIORITY_OTHER = 3


def _event_statuses(event: Event, now: datetime, tz: tzinfo) -> set[Status]:
    statuses: set[Status] = set()
    if event.start is not None:
        if event.end is not None and as_aware(event.end, tz) < now:
            statuses.add(Status.PAST)
        elif as_aware(event.start, tz) > now:
            statuses.add(Status.SCHEDULED)
    statuses.add(Status.ACTIVE if event.is_active else Status.INACTIVE)
    return statuses


def _special_statuses(special: Special, now: datetime, tz: tzinfo) -> set[Status]:
    statuses: set[Status] = set()
    if special.end_date is not None and end_of_day(special.end_date, tz) < now:
        statuses.add(Status.PAST)
    elif special.start_date is not None and start_of_day(special.start_date, tz) > now:
        statuses.add(Status.SCHEDULED)
    statuses.add(Status.ACTIVE if special.is_active else Status.INACTIVE)
    return statuses


def _announcement_statuses(announcement: Announcement, now: datetime, tz: tzinfo) -> set[Status]:
    statuses: set[Status] = set()
    if announcement.publish_at is not None and as_aware(announcement.publish_at, tz) > now:
        statuses.add(Status.SCHEDULED)
    elif announcement.expires_at is not None and as_aware(announcement.expires_at, tz) < now:
        statuses.add(Status.EXPIRED)
    statuses.add(Status.PUBLISHED if announcement.is_published else Status.DRAFT)
    return statuses


def classify_status(item: Item, now: datetime, tz: tzinfo) -> set[Status]:
    """
    Status tags for an item at instant `now`.

    Pure function - no I/O. Date tags (past/scheduled/expired) come from the
    item's stored dates; the flag tag (active/inactive or published/draft) is
    always present, so the result is never empty. Special date bounds cover
    whole company-local days.
    """
    now = as_aware(now, tz)
    if isinstance(item, Event):
        return _event_statuses(item, now, tz)
    if isinstance(item, Special):
        return _special_statuses(item, now, tz)
    if isinstance(item, Announcement):
        return _announcement_statuses(item, now, tz)
    return {Status.INACTIVE}


def status_priority(statuses: set[Status]) -> int:
    """
    Sort tier for a set of statuses.

    active/published (0) > scheduled (1) > past (2) > everything else (3).
    """
    if Status.ACTIVE in statuses or Status.PUBLISHED in statuses:
        return PRIORITY_ACTIVE
    if Status.SCHEDULED in statuses:
        return PRIORITY_SCHEDULED
    if Status.PAST in statuses:
        return PRIORITY_PAST
    return PRIORITY_OTHER


def ordered_statuses(statuses: set[Status]) -> list[Status]:
    """Statuses in declaration order, for stable display."""
    return [s for s in Status if s in statuses]
