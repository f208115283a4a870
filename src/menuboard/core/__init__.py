"""Functional core - pure scheduling logic with no I/O."""

from .items import Event, Special, Announcement, Item, item_from_api
from .recurrence import (
    RecurrenceError,
    ResolverSettings,
    resolve_next_occurrence,
    next_occurrence,
    expand_occurrences,
    upcoming_occurrences,
    describe_pattern,
)
from .status import Status, classify_status, status_priority
from .listing import (
    SortOption,
    FilterOption,
    compare_next,
    sort_items,
    filter_items,
    search_items,
    build_listing,
)

__all__ = [
    # Items
    "Event",
    "Special",
    "Announcement",
    "Item",
    "item_from_api",
    # Recurrence
    "RecurrenceError",
    "ResolverSettings",
    "resolve_next_occurrence",
    "next_occurrence",
    "expand_occurrences",
    "upcoming_occurrences",
    "describe_pattern",
    # Status
    "Status",
    "classify_status",
    "status_priority",
    # Listing
    "SortOption",
    "FilterOption",
    "compare_next",
    "sort_items",
    "filter_items",
    "search_items",
    "build_listing",
]
