"""File-based snapshot storage adapter."""

import json
import logging
from datetime import tzinfo
from pathlib import Path

from menuboard.core.clock import company_zone
from menuboard.core.items import Announcement, Event, Item, Special, items_from_rows

logger = logging.getLogger(__name__)

COLLECTIONS = ("events", "specials", "announcements")


class JsonSnapshotStore:
    """
    JSON snapshot storage.

    Implements ItemRepository protocol. One file holds the raw admin API
    rows as {"events": [...], "specials": [...], "announcements": [...]}.
    """

    def __init__(self, path: Path | str, tz: tzinfo | None = None):
        self.path = Path(path).expanduser()
        self.tz = tz or company_zone()

    def load(self) -> dict[str, list]:
        """Read raw rows. A missing file is an empty snapshot."""
        if not self.path.exists():
            logger.debug(f"No snapshot at {self.path}")
            return {name: [] for name in COLLECTIONS}

        data = json.loads(self.path.read_text())
        if not isinstance(data, dict):
            raise ValueError(f"Snapshot {self.path} must contain a JSON object")
        return {name: data.get(name) or [] for name in COLLECTIONS}

    def save(self, raw: dict[str, list]) -> None:
        """Write raw rows, creating parent directories as needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {name: raw.get(name, []) for name in COLLECTIONS}
        self.path.write_text(json.dumps(payload, indent=2, default=str))

    def fetch_events(self) -> list[Event]:
        return items_from_rows(self.load()["events"], Event, self.tz)

    def fetch_specials(self) -> list[Special]:
        return items_from_rows(self.load()["specials"], Special, self.tz)

    def fetch_announcements(self) -> list[Announcement]:
        return items_from_rows(self.load()["announcements"], Announcement, self.tz)

    def fetch_all(self) -> list[Item]:
        """Fetch events, specials and announcements as one list."""
        raw = self.load()
        return [
            *items_from_rows(raw["events"], Event, self.tz),
            *items_from_rows(raw["specials"], Special, self.tz),
            *items_from_rows(raw["announcements"], Announcement, self.tz),
        ]
