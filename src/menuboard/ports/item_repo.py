"""Item repository interface."""

from typing import Protocol

from menuboard.core.items import Announcement, Event, Item, Special


class ItemRepository(Protocol):
    """Interface for loading item snapshots from any backend."""

    def fetch_events(self) -> list[Event]:
        """Fetch all events."""
        ...

    def fetch_specials(self) -> list[Special]:
        """Fetch all food and drink specials."""
        ...

    def fetch_announcements(self) -> list[Announcement]:
        """Fetch all announcements."""
        ...

    def fetch_all(self) -> list[Item]:
        """Fetch events, specials and announcements as one list."""
        ...
