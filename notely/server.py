"""The HTTP application and the command that serves it."""

from __future__ import annotations

import argparse
import hashlib
import json
import logging
import os
import secrets
import sqlite3
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from functools import wraps
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, Response, request

from . import models
from .auth import AuthError, get_api_key
from .database import NotFoundError, Queries, User, create_schema
from .responses import respond_with_error, respond_with_json

logger = logging.getLogger(__name__)

ALLOWED_ORIGIN_PREFIXES = ("https://", "http://")
ALLOWED_METHODS = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
EXPOSED_HEADERS = ("Link",)
MAX_AGE = 300

_JSON_WHITESPACE = " \t\n\r"


def generate_random_sha256_hash() -> str:
    """Return the hex SHA-256 digest of 32 random bytes."""
    return hashlib.sha256(secrets.token_bytes(32)).hexdigest()


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _decode_string_field(raw: bytes, field: str) -> str:
    """Read one string field from the first JSON value of a request body."""
    text = raw.decode("utf-8").lstrip(_JSON_WHITESPACE)
    data, _ = json.JSONDecoder().raw_decode(text)
    if data is None:
        return ""
    if not isinstance(data, dict):
        raise ValueError("request body is not a JSON object")
    if field in data:
        value = data[field]
    else:
        value = next((v for k, v in data.items() if k.lower() == field.lower()), None)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {field!r} is not a string")
    return value


def _origin_allowed(origin: str) -> bool:
    origin = origin.lower()
    return any(origin.startswith(prefix) for prefix in ALLOWED_ORIGIN_PREFIXES)


def _is_preflight() -> bool:
    return request.method == "OPTIONS" and bool(
        request.headers.get("Access-Control-Request-Method")
    )


def _handle_preflight() -> Response | None:
    if not _is_preflight():
        return None
    response = Response(status=200)
    for name in ("Origin", "Access-Control-Request-Method", "Access-Control-Request-Headers"):
        response.headers.add("Vary", name)
    origin = request.headers.get("Origin", "")
    if not origin or not _origin_allowed(origin):
        return response
    method = request.headers["Access-Control-Request-Method"].upper()
    if method not in ALLOWED_METHODS:
        return response
    response.headers["Access-Control-Allow-Origin"] = origin
    response.headers["Access-Control-Allow-Methods"] = method
    requested_headers = request.headers.get("Access-Control-Request-Headers", "").strip()
    if requested_headers:
        response.headers["Access-Control-Allow-Headers"] = requested_headers
    response.headers["Access-Control-Max-Age"] = str(MAX_AGE)
    return response


def _add_cors_headers(response: Response) -> Response:
    if _is_preflight():
        return response
    response.headers.add("Vary", "Origin")
    origin = request.headers.get("Origin", "")
    if not origin or not _origin_allowed(origin) or request.method not in ALLOWED_METHODS:
        return response
    response.headers["Access-Control-Allow-Origin"] = origin
    response.headers["Access-Control-Expose-Headers"] = ", ".join(EXPOSED_HEADERS)
    return response


def create_app(queries: Queries | None = None, static_dir: str | os.PathLike = "static") -> Flask:
    """Build the application; without queries only the static and health routes exist."""
    app = Flask(__name__, static_folder=None)
    static_path = Path(static_dir)
    app.before_request(_handle_preflight)
    app.after_request(_add_cors_headers)

    @app.get("/")
    def index() -> Response:
        try:
            body = (static_path / "index.html").read_bytes()
        except OSError as err:
            response = Response(
                f"{err}\n", status=500, content_type="text/plain; charset=utf-8"
            )
            response.headers["X-Content-Type-Options"] = "nosniff"
            return response
        return Response(body, status=200, mimetype="text/html")

    @app.get("/v1/healthz")
    def readiness() -> Response:
        return respond_with_json(200, {"status": "ok"})

    if queries is None:
        return app

    def authed(handler: Callable[[User], Response]) -> Callable[[], Response]:
        @wraps(handler)
        def wrapper() -> Response:
            try:
                api_key = get_api_key(request.headers)
            except AuthError as err:
                return respond_with_error(401, "Couldn't find api key", err)
            try:
                user = queries.get_user(api_key)
            except (NotFoundError, sqlite3.Error) as err:
                return respond_with_error(404, "Couldn't get user", err)
            return handler(user)

        return wrapper

    @app.post("/v1/users")
    def users_create() -> Response:
        try:
            name = _decode_string_field(request.get_data(), "name")
        except ValueError as err:
            return respond_with_error(500, "Couldn't decode parameters", err)
        api_key = generate_random_sha256_hash()
        try:
            queries.create_user(str(uuid.uuid4()), _now(), _now(), name, api_key)
        except sqlite3.Error as err:
            return respond_with_error(500, "Couldn't create user", err)
        try:
            user = queries.get_user(api_key)
        except (NotFoundError, sqlite3.Error) as err:
            return respond_with_error(500, "Couldn't get user", err)
        try:
            user_resp = models.database_user_to_user(user)
        except ValueError as err:
            return respond_with_error(500, "Couldn't convert user", err)
        return respond_with_json(201, user_resp)

    @app.get("/v1/users")
    @authed
    def users_get(user: User) -> Response:
        try:
            user_resp = models.database_user_to_user(user)
        except ValueError as err:
            return respond_with_error(500, "Couldn't convert user", err)
        return respond_with_json(200, user_resp)

    @app.get("/v1/notes")
    @authed
    def notes_get(user: User) -> Response:
        try:
            notes = queries.get_notes_for_user(user.id)
        except sqlite3.Error as err:
            return respond_with_error(500, "Couldn't get posts for user", err)
        try:
            notes_resp = models.database_notes_to_notes(notes)
        except ValueError as err:
            return respond_with_error(500, "Couldn't convert posts", err)
        return respond_with_json(200, notes_resp)

    @app.post("/v1/notes")
    @authed
    def notes_create(user: User) -> Response:
        try:
            text = _decode_string_field(request.get_data(), "note")
        except ValueError as err:
            return respond_with_error(500, "Couldn't decode parameters", err)
        note_id = str(uuid.uuid4())
        try:
            queries.create_note(note_id, _now(), _now(), text, user.id)
        except sqlite3.Error as err:
            return respond_with_error(500, "Couldn't create note", err)
        try:
            note = queries.get_note(note_id)
        except (NotFoundError, sqlite3.Error) as err:
            return respond_with_error(404, "Couldn't get note", err)
        try:
            note_resp = models.database_note_to_note(note)
        except ValueError as err:
            return respond_with_error(500, "Couldn't convert note", err)
        return respond_with_json(201, note_resp)

    return app


def _load_env_file(path: Path) -> None:
    try:
        with path.open(encoding="utf-8") as stream:
            load_dotenv(stream=stream)
    except OSError as err:
        logger.warning("warning: assuming default configuration. .env unreadable: %s", err)


def main(argv: list[str] | None = None) -> None:
    """Serve the application on the port named by the PORT variable."""
    parser = argparse.ArgumentParser(prog="notely", description="Serve the notes API.")
    parser.add_argument(
        "--static-dir",
        default="static",
        help="directory holding index.html (default: %(default)s)",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    _load_env_file(Path(".env"))

    port = os.environ.get("PORT", "")
    if not port:
        logger.critical("PORT environment variable is not set")
        raise SystemExit(1)
    try:
        port_number = int(port)
    except ValueError:
        logger.critical("invalid PORT value: %s", port)
        raise SystemExit(1) from None

    queries = None
    db_url = os.environ.get("DATABASE_URL", "")
    if not db_url:
        logger.info("DATABASE_URL environment variable is not set")
        logger.info("Running without CRUD endpoints")
    else:
        try:
            connection = sqlite3.connect(
                db_url, uri=db_url.startswith("file:"), check_same_thread=False
            )
            create_schema(connection)
        except sqlite3.Error as err:
            logger.critical("%s", err)
            raise SystemExit(1) from err
        queries = Queries(connection)
        logger.info("Connected to database!")

    app = create_app(queries, args.static_dir)
    logger.info("Serving on port: %s", port)
    app.run(host="0.0.0.0", port=port_number)


if __name__ == "__main__":
    main()