"""Admin site API adapter - HTTP client for item snapshots."""

import logging
from datetime import tzinfo

import requests

from menuboard.config import Config, load_config
from menuboard.core.clock import company_zone
from menuboard.core.items import Announcement, Event, Item, Special, items_from_rows

logger = logging.getLogger(__name__)

ENDPOINTS = {
    "events": "/api/events",
    "specials": "/api/specials",
    "announcements": "/api/announcements",
}


class AdminAPIError(Exception):
    """Raised when the admin API cannot be reached or returns bad data."""

    pass


class AdminAPIAdapter:
    """
    Admin site API adapter.

    Implements ItemRepository protocol. Reads the public list endpoints of
    the admin site. No business logic - just I/O.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        config: Config | None = None,
        session: requests.Session | None = None,
        timeout: int = 30,
    ):
        self.config = config or load_config()
        self.base_url = (base_url or self.config.admin_base_url).rstrip("/")
        self.token = token if token is not None else self.config.admin_api_token
        self.tz: tzinfo = company_zone(self.config.timezone)
        self.timeout = timeout
        self._session = session or requests.Session()

        if not self.base_url:
            raise AdminAPIError("No admin URL. Set ADMIN_BASE_URL in config/menuboard.conf or pass --source.")

    def _api_request(self, endpoint: str) -> list:
        """GET a list endpoint."""
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        url = f"{self.base_url}{endpoint}"
        logger.debug(f"GET {url}")
        try:
            resp = self._session.get(url, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as e:
            raise AdminAPIError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise AdminAPIError(f"Invalid JSON from {url}: {e}") from e

        if not isinstance(data, list):
            raise AdminAPIError(f"Expected a list from {url}, got {type(data).__name__}")
        return data

    def fetch_raw(self) -> dict[str, list]:
        """Raw rows for every endpoint, keyed by collection name."""
        return {name: self._api_request(endpoint) for name, endpoint in ENDPOINTS.items()}

    def fetch_events(self) -> list[Event]:
        return items_from_rows(self._api_request(ENDPOINTS["events"]), Event, self.tz)

    def fetch_specials(self) -> list[Special]:
        return items_from_rows(self._api_request(ENDPOINTS["specials"]), Special, self.tz)

    def fetch_announcements(self) -> list[Announcement]:
        return items_from_rows(self._api_request(ENDPOINTS["announcements"]), Announcement, self.tz)

    def fetch_all(self) -> list[Item]:
        """Fetch events, specials and announcements as one list."""
        return [*self.fetch_events(), *self.fetch_specials(), *self.fetch_announcements()]
