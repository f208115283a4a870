"""Tests for the admin API adapter."""

from unittest.mock import MagicMock

import pytest
import requests

from menuboard.adapters.admin_api import AdminAPIAdapter, AdminAPIError
from menuboard.config import Config
from menuboard.core.items import Announcement, Event, Special


def _response(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    return resp


@pytest.fixture
def config():
    return Config(admin_base_url="https://admin.example.com", admin_api_token="tok")


@pytest.fixture
def session():
    rows = {
        "https://admin.example.com/api/events": [
            {"id": "e1", "title": "Trivia", "startDateTime": "2025-05-06T01:00:00Z", "recurrenceRule": "FREQ=WEEKLY"},
        ],
        "https://admin.example.com/api/specials": [
            {"id": "s1", "title": "Happy Hour", "type": "drink", "appliesOn": "Mon,Fri"},
        ],
        "https://admin.example.com/api/announcements": [
            {"id": "a1", "title": "Patio Open", "isPublished": True},
        ],
    }
    session = MagicMock()
    session.get.side_effect = lambda url, **kwargs: _response(rows[url])
    return session


class TestAdminAPIAdapter:
    def test_requires_base_url(self):
        with pytest.raises(AdminAPIError, match="No admin URL"):
            AdminAPIAdapter(config=Config(), session=MagicMock())

    def test_base_url_override(self, config, session):
        adapter = AdminAPIAdapter(base_url="https://other.example.com/", config=config, session=session)
        assert adapter.base_url == "https://other.example.com"

    def test_sends_bearer_token(self, config, session):
        adapter = AdminAPIAdapter(config=config, session=session)
        adapter.fetch_events()

        args, kwargs = session.get.call_args
        assert args[0] == "https://admin.example.com/api/events"
        assert kwargs["headers"]["Authorization"] == "Bearer tok"
        assert kwargs["timeout"] == 30

    def test_no_token_no_header(self, session):
        adapter = AdminAPIAdapter(config=Config(admin_base_url="https://admin.example.com"), session=session)
        adapter.fetch_specials()
        assert "Authorization" not in session.get.call_args.kwargs["headers"]

    def test_fetch_all(self, config, session):
        items = AdminAPIAdapter(config=config, session=session).fetch_all()
        assert [type(i) for i in items] == [Event, Special, Announcement]
        assert items[1].applies_on == ["Monday", "Friday"]

    def test_fetch_raw(self, config, session):
        raw = AdminAPIAdapter(config=config, session=session).fetch_raw()
        assert list(raw) == ["events", "specials", "announcements"]
        assert raw["events"][0]["id"] == "e1"

    def test_connection_error(self, config):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(AdminAPIError, match="failed"):
            AdminAPIAdapter(config=config, session=session).fetch_events()

    def test_http_error(self, config):
        resp = MagicMock()
        resp.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
        session = MagicMock()
        session.get.return_value = resp
        with pytest.raises(AdminAPIError):
            AdminAPIAdapter(config=config, session=session).fetch_events()

    def test_invalid_json(self, config):
        resp = MagicMock()
        resp.json.side_effect = ValueError("Expecting value")
        session = MagicMock()
        session.get.return_value = resp
        with pytest.raises(AdminAPIError, match="Invalid JSON"):
            AdminAPIAdapter(config=config, session=session).fetch_announcements()

    def test_non_list_payload(self, config):
        session = MagicMock()
        session.get.return_value = _response({"error": "nope"})
        with pytest.raises(AdminAPIError, match="Expected a list"):
            AdminAPIAdapter(config=config, session=session).fetch_events()
