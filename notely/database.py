"""SQLite storage for users and notes."""

from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass

_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    name TEXT NOT NULL,
    api_key TEXT UNIQUE NOT NULL
);
CREATE TABLE IF NOT EXISTS notes (
    id TEXT PRIMARY KEY,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    note TEXT NOT NULL,
    user_id TEXT NOT NULL REFERENCES users (id) ON DELETE CASCADE
);
"""

_CREATE_NOTE = (
    "INSERT INTO notes (id, created_at, updated_at, note, user_id) "
    "VALUES (?, ?, ?, ?, ?)"
)
_GET_NOTE = "SELECT id, created_at, updated_at, note, user_id FROM notes WHERE id = ?"
_GET_NOTES_FOR_USER = (
    "SELECT id, created_at, updated_at, note, user_id FROM notes WHERE user_id = ?"
)
_CREATE_USER = (
    "INSERT INTO users (id, created_at, updated_at, name, api_key) "
    "VALUES (?, ?, ?, ?, ?)"
)
_GET_USER = (
    "SELECT id, created_at, updated_at, name, api_key FROM users WHERE api_key = ?"
)


@dataclass(frozen=True)
class User:
    """A user row as stored."""

    id: str
    created_at: str
    updated_at: str
    name: str
    api_key: str


@dataclass(frozen=True)
class Note:
    """A note row as stored."""

    id: str
    created_at: str
    updated_at: str
    note: str
    user_id: str


class NotFoundError(LookupError):
    """A query that expects one row found none."""


def create_schema(connection: sqlite3.Connection) -> None:
    """Create the users and notes tables if they do not exist."""
    with connection:
        connection.executescript(_SCHEMA)


class Queries:
    """The queries the application runs against its database."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._lock = threading.Lock()

    def _execute(self, sql: str, params: tuple) -> None:
        with self._lock, self._connection:
            self._connection.execute(sql, params)

    def _fetch_one(self, sql: str, params: tuple) -> tuple | None:
        with self._lock:
            return self._connection.execute(sql, params).fetchone()

    def create_note(self, id, created_at, updated_at, note, user_id) -> None:
        """Insert a note."""
        self._execute(_CREATE_NOTE, (id, created_at, updated_at, note, user_id))

    def get_note(self, id) -> Note:
        """Return the note with the given id."""
        row = self._fetch_one(_GET_NOTE, (id,))
        if row is None:
            raise NotFoundError(f"no note with id {id!r}")
        return Note(*row)

    def get_notes_for_user(self, user_id) -> list[Note]:
        """Return every note belonging to a user."""
        with self._lock:
            rows = self._connection.execute(_GET_NOTES_FOR_USER, (user_id,)).fetchall()
        return [Note(*row) for row in rows]

    def create_user(self, id, created_at, updated_at, name, api_key) -> None:
        """Insert a user."""
        self._execute(_CREATE_USER, (id, created_at, updated_at, name, api_key))

    def get_user(self, api_key) -> User:
        """Return the user owning an API key."""
        row = self._fetch_one(_GET_USER, (api_key,))
        if row is None:
            raise NotFoundError("no user with that api key")
        return User(*row)