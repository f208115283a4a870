"""Configuration management for menuboard."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

MENUBOARD_HOME = Path(os.environ.get("MENUBOARD_HOME", Path.home() / "menuboard"))
CONFIG_FILE = MENUBOARD_HOME / "config" / "menuboard.conf"
DATA_DIR = MENUBOARD_HOME / "data"


@dataclass
class Config:
    """menuboard configuration."""

    timezone: str = "America/Denver"
    admin_base_url: str = ""
    admin_api_token: str = ""
    snapshot_path: str = ""
    default_sort: str = "next"
    recurrence_scan_limit: int = 10
    weekday_scan_days: int = 14
    far_future_years: int = 100
    # "last" sorts undated announcements with the far-future sentinel,
    # "first" keeps the old epoch behaviour.
    undated_announcements: str = "last"

    @property
    def resolved_snapshot_path(self) -> Path:
        if self.snapshot_path:
            return Path(self.snapshot_path).expanduser()
        return DATA_DIR / "snapshot.json"


def _parse_int(key: str, value: str, default: int) -> int:
    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {key.upper()}: {value!r}, using {default}")
        return default
    if parsed <= 0:
        logger.warning(f"{key.upper()} must be positive, got {parsed}, using {default}")
        return default
    return parsed


def _strip_value(value: str) -> str:
    # Handle quoted values with inline comments: "value" # comment
    if value.startswith('"'):
        end_quote = value.find('"', 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if value.startswith("'"):
        end_quote = value.find("'", 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from menuboard.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _strip_value(value.strip())

        match key:
            case "timezone":
                config.timezone = value
            case "admin_base_url":
                config.admin_base_url = value.rstrip("/")
            case "admin_api_token":
                config.admin_api_token = value
            case "snapshot_path":
                config.snapshot_path = value
            case "default_sort":
                config.default_sort = value
            case "recurrence_scan_limit":
                config.recurrence_scan_limit = _parse_int(key, value, config.recurrence_scan_limit)
            case "weekday_scan_days":
                config.weekday_scan_days = _parse_int(key, value, config.weekday_scan_days)
            case "far_future_years":
                config.far_future_years = _parse_int(key, value, config.far_future_years)
            case "undated_announcements":
                if value.lower() in ("first", "last"):
                    config.undated_announcements = value.lower()
                else:
                    logger.warning(f"Unknown UNDATED_ANNOUNCEMENTS value: {value!r}")

    return config
