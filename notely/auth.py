"""Extraction of API keys from request headers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_AUTH_HEADER = "Authorization"
_SCHEME = "ApiKey"


class AuthError(Exception):
    """Raised when a request does not carry a usable API key."""


class NoAuthHeaderIncludedError(AuthError):
    """The request has no Authorization header."""

    def __init__(self, message: str = "no authorization header included") -> None:
        super().__init__(message)


class MalformedAuthorizationHeaderError(AuthError):
    """The Authorization header is not of the form ``ApiKey <key>``."""

    def __init__(self, message: str = "malformed authorization header") -> None:
        super().__init__(message)


def _header_value(headers: Mapping[str, Any], name: str) -> str:
    value = headers.get(name)
    if value is None:
        wanted = name.lower()
        value = next(
            (v for k, v in headers.items() if k.lower() == wanted),
            None,
        )
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    return value or ""


def get_api_key(headers: Mapping[str, Any]) -> str:
    """Return the API key from an ``Authorization: ApiKey <key>`` header."""
    auth_header = _header_value(headers, _AUTH_HEADER)
    if not auth_header:
        raise NoAuthHeaderIncludedError()
    parts = auth_header.split(" ")
    if len(parts) < 2 or parts[0] != _SCHEME:
        raise MalformedAuthorizationHeaderError()
    return parts[1]