"""Sorting, filtering and search over mixed item lists - no I/O dependencies."""

from datetime import datetime, tzinfo
from enum import Enum

from .clock import as_aware
from .items import Announcement, Event, Item, Special, is_enabled
from .recurrence import ResolverSettings, resolve_next_occurrence
from .status import classify_status, status_priority


class SortOption(str, Enum):
    """Sort orders offered by the admin list."""

    NEXT = "next"
    DATE = "date"  # newest first
    DATE_OLDEST = "date-oldest"
    TITLE = "title"
    TITLE_DESC = "title-desc"
    TYPE = "type"


class FilterOption(str, Enum):
    """Filters offered by the admin list."""

    ALL = "all"
    EVENTS = "events"
    SPECIALS = "specials"
    ANNOUNCEMENTS = "announcements"
    ACTIVE = "active"
    INACTIVE = "inactive"
    FOOD = "food"
    DRINK = "drink"
    WEEKLY = "weekly"


TYPE_ORDER = {Event.kind: 1, Special.kind: 2, Announcement.kind: 3}


def next_date(item: Item, now: datetime, tz: tzinfo, settings: ResolverSettings | None = None) -> datetime:
    """Next-occurrence date using the given settings."""
    settings = settings or ResolverSettings()
    return resolve_next_occurrence(
        item,
        now,
        tz,
        scan_limit=settings.scan_limit,
        weekday_scan_days=settings.weekday_scan_days,
        far_future_years=settings.far_future_years,
        undated_announcements=settings.undated_announcements,
    )


def next_sort_key(
    item: Item,
    now: datetime,
    tz: tzinfo,
    settings: ResolverSettings | None = None,
) -> tuple[int, datetime]:
    """(status tier, next-occurrence date) - the key behind the "Next" order."""
    priority = status_priority(classify_status(item, now, tz))
    return priority, next_date(item, now, tz, settings)


def compare_next(
    a: Item,
    b: Item,
    now: datetime,
    tz: tzinfo,
    settings: ResolverSettings | None = None,
) -> int:
    """
    Three-way comparison for the default "Next" order.

    Status tier first (active, scheduled, past, other), then the earlier
    next-occurrence date. Never raises for bad item data.
    """
    a_key = next_sort_key(a, now, tz, settings)
    b_key = next_sort_key(b, now, tz, settings)
    if a_key < b_key:
        return -1
    if a_key > b_key:
        return 1
    return 0


def sort_items(
    items: list[Item],
    option: SortOption | str = SortOption.NEXT,
    now: datetime | None = None,
    tz: tzinfo | None = None,
    settings: ResolverSettings | None = None,
) -> list[Item]:
    """
    Stable sort of a mixed list.

    Pure function - no I/O. `now` and `tz` are required for the date-based
    orders. Ties keep their input order, so sorting is idempotent.
    """
    option = SortOption(option)

    if option in (SortOption.TITLE, SortOption.TITLE_DESC):
        return sorted(
            items,
            key=lambda i: i.title.casefold(),
            reverse=option == SortOption.TITLE_DESC,
        )
    if option == SortOption.TYPE:
        return sorted(items, key=lambda i: TYPE_ORDER[i.kind])

    if now is None or tz is None:
        raise ValueError(f"Sorting by {option.value!r} needs both now and tz")
    now = as_aware(now, tz)

    if option == SortOption.NEXT:
        keys = {id(i): next_sort_key(i, now, tz, settings) for i in items}
        return sorted(items, key=lambda i: keys[id(i)])

    dates = {id(i): next_date(i, now, tz, settings) for i in items}
    return sorted(items, key=lambda i: dates[id(i)], reverse=option == SortOption.DATE)


def filter_items(items: list[Item], option: FilterOption | str = FilterOption.ALL) -> list[Item]:
    """Filter a mixed list by kind, flag or special type."""
    option = FilterOption(option)
    match option:
        case FilterOption.ALL:
            return list(items)
        case FilterOption.EVENTS:
            return [i for i in items if isinstance(i, Event)]
        case FilterOption.SPECIALS:
            return [i for i in items if isinstance(i, Special)]
        case FilterOption.ANNOUNCEMENTS:
            return [i for i in items if isinstance(i, Announcement)]
        case FilterOption.ACTIVE:
            return [i for i in items if is_enabled(i)]
        case FilterOption.INACTIVE:
            return [i for i in items if not is_enabled(i)]
        case FilterOption.FOOD:
            return [i for i in items if isinstance(i, Special) and i.type == "food"]
        case FilterOption.DRINK:
            return [i for i in items if isinstance(i, Special) and i.type == "drink"]
        case FilterOption.WEEKLY:
            return [i for i in items if isinstance(i, Special) and i.is_weekly]
    return list(items)


_SEARCH_FIELDS = ("title", "description", "body", "price_notes", "venue_area")


def search_items(items: list[Item], query: str | None) -> list[Item]:
    """Case-insensitive substring search over the text fields of each item."""
    if not query or not query.strip():
        return list(items)
    needle = query.strip().lower()

    def _matches(item: Item) -> bool:
        for name in _SEARCH_FIELDS:
            value = getattr(item, name, None)
            if value and needle in str(value).lower():
                return True
        return False

    return [i for i in items if _matches(i)]


def build_listing(
    items: list[Item],
    now: datetime,
    tz: tzinfo,
    sort: SortOption | str = SortOption.NEXT,
    filter_option: FilterOption | str = FilterOption.ALL,
    query: str | None = None,
    settings: ResolverSettings | None = None,
) -> list[Item]:
    """Search, then filter, then sort - the admin list pipeline."""
    result = search_items(items, query)
    result = filter_items(result, filter_option)
    return sort_items(result, sort, now, tz, settings)
