# notely

notely is a small JSON HTTP service for keeping notes. You create a user with
a name and get back a generated API key. That key then authenticates each
request that reads the user's profile or creates and lists their notes. The
data is kept in a SQLite database.

## Installing

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Running

```
PORT=8080 DATABASE_URL=notely.db notely
```

The `notely` command reads its settings from the environment. When a `.env`
file is present in the working directory, it is loaded first. If that file
cannot be read, a warning is logged and the server carries on.

- `PORT` (required): the port to listen on, as a whole number. The server
  listens on all interfaces. If `PORT` is missing or is not a number, the
  command exits with status 1.
- `DATABASE_URL` (optional): the SQLite database to open. This is a file path,
  or a `file:` URI. The `users` and `notes` tables are created if they do not
  exist. Without `DATABASE_URL` the server still starts, but it serves only
  the index page and the health check. The user and note endpoints are left
  out.

Options:

- `--static-dir DIR`: the directory that holds `index.html`, served at `/`
  (default: `static`).

## Endpoints

| Method | Path          | Auth | Description                          |
|--------|---------------|------|--------------------------------------|
| GET    | `/`           | no   | `index.html` from the static directory |
| GET    | `/v1/healthz` | no   | Readiness check: `{"status": "ok"}`  |
| POST   | `/v1/users`   | no   | Create a user from `{"name": ...}`   |
| GET    | `/v1/users`   | yes  | The authenticated user               |
| POST   | `/v1/notes`   | yes  | Create a note from `{"note": ...}`   |
| GET    | `/v1/notes`   | yes  | All notes of the authenticated user  |

An authenticated request carries the key in the `Authorization` header:

```
Authorization: ApiKey placeholder
```

These are the error responses:

- A missing or malformed header gets a `401`.
- A key that matches no user gets a `404`.
- A body that cannot be decoded gets a `500`.

Every error is returned as `{"error": "<message>"}`.

Users and notes are returned with `id`, `created_at` and `updated_at` fields,
with the timestamps in RFC 3339. A user also has `name` and `api_key`; a note
also has `note` and `user_id`. Creating a user or a note answers `201`.

CORS headers are added for `http://` and `https://` origins. Preflight
requests are answered for the GET, POST, PUT, DELETE and OPTIONS methods.

## Using it as a library

```python
import sqlite3

from notely.database import Queries, create_schema
from notely.server import create_app

connection = sqlite3.connect("notely.db", check_same_thread=False)
create_schema(connection)
app = create_app(Queries(connection), static_dir="static")
app.run(port=8080)
```

`create_app(None)` builds an application that has only the `/` and
`/v1/healthz` routes.

The modules:

- `notely.auth`: `get_api_key(headers)` takes the key out of a header mapping.
  When it cannot, it raises `NoAuthHeaderIncludedError` or
  `MalformedAuthorizationHeaderError`, which are both subclasses of
  `AuthError`.
- `notely.database`: the `User` and `Note` rows, `create_schema` and
  `Queries`. When `get_user` or `get_note` finds no row, it raises
  `NotFoundError`.
- `notely.models`: the API forms of users and notes, each with `to_dict()`,
  and the functions `database_user_to_user`, `database_note_to_note` and
  `database_notes_to_notes`.
- `notely.responses`: `respond_with_json` and `respond_with_error` build Flask
  JSON responses.
- `notely.server`: `create_app`, `main` and `generate_random_sha256_hash`.

## What it does not do

- The package does not ship an `index.html`. `GET /` answers `500` until the
  static directory holds one.
- Storage is a local SQLite database only. `DATABASE_URL` is handed to
  `sqlite3`, so remote database URLs are not supported.
- Users and notes cannot be updated or deleted.