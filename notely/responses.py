"""JSON response helpers."""

from __future__ import annotations

import json
import logging
from typing import Any

from flask import Response

logger = logging.getLogger(__name__)

_CONTENT_TYPE = "application/json"
_ESCAPES = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)


def _to_serialisable(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"object of type {type(value).__name__} is not JSON serialisable")


def _encode(payload: Any) -> bytes:
    text = json.dumps(
        payload,
        default=_to_serialisable,
        ensure_ascii=False,
        separators=(",", ":"),
        allow_nan=False,
    )
    return text.translate(_ESCAPES).encode("utf-8")


def respond_with_json(code: int, payload: Any) -> Response:
    """Build a JSON response; a payload that cannot be encoded gives an empty 500."""
    try:
        body = _encode(payload)
    except (TypeError, ValueError) as err:
        logger.error("Error marshalling JSON: %s", err)
        return Response(b"", status=500, content_type=_CONTENT_TYPE)
    return Response(body, status=code, content_type=_CONTENT_TYPE)


def respond_with_error(code: int, msg: str, log_err: BaseException | None = None) -> Response:
    """Log the cause and build a ``{"error": msg}`` JSON response."""
    if log_err is not None:
        logger.error("%s", log_err)
    if code > 499:
        logger.error("Responding with 5XX error: %s", msg)
    return respond_with_json(code, {"error": msg})