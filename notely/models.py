"""API representations of users and notes."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from . import database

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})"
    r"(?:[.,](\d+))?"
    r"(Z|[+-]\d{2}:\d{2})"
)


def _parse_rfc3339(value: str) -> datetime:
    match = _RFC3339.fullmatch(value)
    if match is None:
        raise ValueError(f"cannot parse {value!r} as RFC 3339 time")
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    microsecond = int((fraction or "0")[:6].ljust(6, "0"))
    if zone == "Z":
        tz = timezone.utc
    else:
        sign = 1 if zone[0] == "+" else -1
        hours, minutes = int(zone[1:3]), int(zone[4:6])
        if hours > 23 or minutes > 59:
            raise ValueError(f"time zone offset out of range in {value!r}")
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    return datetime(
        int(year), int(month), int(day),
        int(hour), int(minute), int(second),
        microsecond, tzinfo=tz,
    )


def _format_rfc3339(moment: datetime) -> str:
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    if moment.microsecond:
        text += f".{moment.microsecond:06d}".rstrip("0")
    offset = moment.utcoffset() or timedelta(0)
    if not offset:
        return text + "Z"
    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class User:
    """A user as returned by the API."""

    id: str
    created_at: datetime
    updated_at: datetime
    name: str
    api_key: str

    def to_dict(self) -> dict[str, str]:
        """Return the JSON form of the user."""
        return {
            "id": self.id,
            "created_at": _format_rfc3339(self.created_at),
            "updated_at": _format_rfc3339(self.updated_at),
            "name": self.name,
            "api_key": self.api_key,
        }


@dataclass(frozen=True)
class Note:
    """A note as returned by the API."""

    id: str
    created_at: datetime
    updated_at: datetime
    note: str
    user_id: str

    def to_dict(self) -> dict[str, str]:
        """Return the JSON form of the note."""
        return {
            "id": self.id,
            "created_at": _format_rfc3339(self.created_at),
            "updated_at": _format_rfc3339(self.updated_at),
            "note": self.note,
            "user_id": self.user_id,
        }


def database_user_to_user(user: database.User) -> User:
    """Convert a stored user, parsing its timestamps."""
    return User(
        id=user.id,
        created_at=_parse_rfc3339(user.created_at),
        updated_at=_parse_rfc3339(user.updated_at),
        name=user.name,
        api_key=user.api_key,
    )


def database_note_to_note(note: database.Note) -> Note:
    """Convert a stored note, parsing its timestamps."""
    return Note(
        id=note.id,
        created_at=_parse_rfc3339(note.created_at),
        updated_at=_parse_rfc3339(note.updated_at),
        note=note.note,
        user_id=note.user_id,
    )


def database_notes_to_notes(notes: Iterable[database.Note]) -> list[Note]:
    """Convert stored notes, keeping their order."""
    return [database_note_to_note(note) for note in notes]