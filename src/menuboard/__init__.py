"""menuboard - scheduling core for restaurant specials, events and announcements."""

__version__ = "0.1.0"
