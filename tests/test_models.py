from datetime import datetime, timezone

import pytest

from notely import database
from notely.models import (
    Note,
    User,
    database_note_to_note,
    database_notes_to_notes,
    database_user_to_user,
)

STAMP = "2024-01-02T03:04:05Z"


def _db_user(created_at=STAMP, updated_at=STAMP):
    return database.User("u1", created_at, updated_at, "alice", "placeholder")


def _db_note(note_id="n1", created_at=STAMP):
    return database.Note(note_id, created_at, STAMP, "buy milk", "u1")


def test_user_conversion_parses_utc_time():
    user = database_user_to_user(_db_user())
    assert isinstance(user, User)
    assert user.created_at == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert user.name == "alice"
    assert user.api_key == "placeholder"


def test_user_to_dict_round_trips_timestamps():
    data = database_user_to_user(_db_user()).to_dict()
    assert set(data) == {"id", "created_at", "updated_at", "name", "api_key"}
    assert data["created_at"] == STAMP
    assert data["updated_at"] == STAMP


@pytest.mark.parametrize(
    "stamp",
    ["2024-01-02T03:04:05+02:00", "2024-01-02T03:04:05-05:30", "2024-01-02T03:04:05.25Z"],
)
def test_offsets_and_fractions_round_trip(stamp):
    note = database_note_to_note(_db_note(created_at=stamp))
    assert note.to_dict()["created_at"] == stamp


@pytest.mark.parametrize(
    "stamp",
    ["2024-01-02 03:04:05Z", "not a time", "2024-13-01T00:00:00Z", "2024-01-02T03:04:05"],
)
def test_invalid_timestamps_raise(stamp):
    with pytest.raises(ValueError):
        database_user_to_user(_db_user(updated_at=stamp))


def test_note_to_dict_keys_and_values():
    data = database_note_to_note(_db_note()).to_dict()
    assert data == {
        "id": "n1",
        "created_at": STAMP,
        "updated_at": STAMP,
        "note": "buy milk",
        "user_id": "u1",
    }


def test_notes_conversion_keeps_order():
    notes = database_notes_to_notes([_db_note("n2"), _db_note("n1")])
    assert [note.id for note in notes] == ["n2", "n1"]
    assert all(isinstance(note, Note) for note in notes)


def test_notes_conversion_of_nothing_is_empty_list():
    assert database_notes_to_notes([]) == []


def test_notes_conversion_propagates_errors():
    with pytest.raises(ValueError):
        database_notes_to_notes([_db_note("n1"), _db_note("n2", created_at="bad")])