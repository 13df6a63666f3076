"""A small JSON HTTP service for users and their notes, authenticated by API key and stored in SQLite."""

__version__ = "0.1.0"