import sqlite3

import pytest

from notely.database import Note, NotFoundError, Queries, User, create_schema

STAMP = "2024-01-02T03:04:05Z"


@pytest.fixture
def connection():
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    yield conn
    conn.close()


@pytest.fixture
def queries(connection):
    return Queries(connection)


def _add_user(queries, user_id, api_key):
    queries.create_user(user_id, STAMP, STAMP, "alice", api_key)


def test_user_round_trip(queries):
    _add_user(queries, "u1", "placeholder")
    user = queries.get_user("placeholder")
    assert user == User("u1", STAMP, STAMP, "alice", "placeholder")


def test_get_user_missing_raises(queries):
    with pytest.raises(NotFoundError):
        queries.get_user("placeholder")


def test_duplicate_user_id_rejected(queries):
    _add_user(queries, "u1", "placeholder")
    with pytest.raises(sqlite3.IntegrityError):
        _add_user(queries, "u1", "token")
    assert queries.get_user("placeholder") == User(
        "u1", STAMP, STAMP, "alice", "placeholder"
    )
    with pytest.raises(NotFoundError):
        queries.get_user("token")


def test_note_round_trip(queries):
    _add_user(queries, "u1", "placeholder")
    queries.create_note("n1", STAMP, STAMP, "buy milk", "u1")
    assert queries.get_note("n1") == Note("n1", STAMP, STAMP, "buy milk", "u1")


def test_get_note_missing_raises(queries):
    with pytest.raises(NotFoundError):
        queries.get_note("n1")


def test_notes_for_user_are_filtered(queries):
    _add_user(queries, "u1", "placeholder")
    _add_user(queries, "u2", "token")
    queries.create_note("n1", STAMP, STAMP, "one", "u1")
    queries.create_note("n2", STAMP, STAMP, "two", "u2")
    queries.create_note("n3", STAMP, STAMP, "three", "u1")
    notes = queries.get_notes_for_user("u1")
    assert {note.id for note in notes} == {"n1", "n3"}
    assert all(note.user_id == "u1" for note in notes)


def test_notes_for_user_without_notes_is_empty(queries):
    _add_user(queries, "u1", "placeholder")
    assert queries.get_notes_for_user("u1") == []


def test_create_schema_is_idempotent(connection, queries):
    _add_user(queries, "u1", "placeholder")
    create_schema(connection)
    assert queries.get_user("placeholder").id == "u1"


def test_writes_are_committed(connection, queries):
    _add_user(queries, "u1", "placeholder")
    assert not connection.in_transaction