"""Adapters - I/O implementations of ports."""

from .admin_api import AdminAPIAdapter, AdminAPIError
from .json_snapshot import JsonSnapshotStore

__all__ = [
    "AdminAPIAdapter",
    "AdminAPIError",
    "JsonSnapshotStore",
]
