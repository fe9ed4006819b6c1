"""Structured errors raised by the auth and messaging API clients."""

from __future__ import annotations

from typing import Any

import httpx

from mpbot.models import ErrorKind


class BotError(Exception):
    """Base error carrying a kind, a message, and optional detail and hint."""

    kind: ErrorKind = ErrorKind.API_REQUEST_FAILURE

    def __init__(
        self,
        message: str,
        *,
        detail: str | None = None,
        hint: str | None = None,
    ) -> None:
        self.message = message
        self.detail = detail
        self.hint = hint
        super().__init__(format_error(self))

    def __str__(self) -> str:
        return format_error(self)


class AuthorizationFailure(BotError):
    """Raised when the client-credentials exchange fails or returns garbage."""

    kind = ErrorKind.AUTHORIZATION_FAILURE


class ApiRequestFailure(BotError):
    """Raised when a call to the messaging API fails."""

    kind = ErrorKind.API_REQUEST_FAILURE


class NotAuthorized(BotError):
    """Raised when an API call is attempted before a token was obtained."""

    kind = ErrorKind.NOT_AUTHORIZED


def format_error(error: BotError) -> str:
    """Render an error as ``message[: detail][ (hint)]``.

    This is the only place errors become text, both for log lines and for
    HTTP response bodies.
    """
    text = error.message
    if error.detail:
        text = f"{text}: {error.detail}"
    if error.hint:
        text = f"{text} ({error.hint})"
    return text


def extract_error_message(error: Exception) -> tuple[str, str | None]:
    """Build ``(message, hint)`` from an httpx error.

    Our APIs answer failures with an ``{"error": ..., "hint": ...}`` body. When
    it is present the message becomes ``"<transport message>: <error>"`` and the
    hint is returned separately; otherwise the transport message is used as is.
    """
    if isinstance(error, httpx.HTTPStatusError):
        base = f"Request failed with status code {error.response.status_code}"
    else:
        base = str(error) or "Unknown error"
    body = _response_body(error)
    if not body or not body.get("error"):
        return base, None

    hint = body.get("hint")
    return f"{base}: {body['error']}", str(hint) if hint else None


def _response_body(error: Exception) -> dict[str, Any] | None:
    if not isinstance(error, httpx.HTTPStatusError):
        return None
    try:
        data = error.response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None
