"""Shared test fixtures for the MessengerPeople sample bot."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from mpbot.config import BotConfig

VERIFICATION_TOKEN = "test-verification-token"
SECRET = "test-webhook-secret"
SENDER_ID = "bot-sender-id"
CLIENT_ID = "test-client-id"
CLIENT_SECRET = "test-client-secret"
API_URL = "https://api.test"
AUTH_URL = "https://auth.test"


@pytest.fixture
def mock_logger() -> MagicMock:
    return MagicMock()


@pytest.fixture
def bot_config() -> BotConfig:
    return make_config()


# --- Factory functions for test data ---


def make_config(**kwargs: Any) -> BotConfig:
    """Factory for BotConfig with sensible defaults."""
    defaults: dict[str, Any] = {
        "verificationToken": VERIFICATION_TOKEN,
        "secret": SECRET,
        "senderId": SENDER_ID,
        "auth": {"clientId": CLIENT_ID, "clientSecret": CLIENT_SECRET},
        "apiUrl": API_URL,
        "authUrl": AUTH_URL,
    }
    defaults.update(kwargs)
    return BotConfig.model_validate(defaults)


def make_response(
    status_code: int = 200,
    json_body: Any = None,
    url: str = "https://test/",
    content: bytes | None = None,
) -> httpx.Response:
    """Build a real httpx.Response so raise_for_status() behaves normally."""
    request = httpx.Request("POST", url)
    if content is not None:
        return httpx.Response(status_code, content=content, request=request)
    return httpx.Response(status_code, json=json_body, request=request)


def make_message_event(text: str = "ping", sender: str = "u1") -> dict[str, Any]:
    return {"sender": sender, "payload": {"text": text}}


@contextmanager
def patched_async_client(target: str, method: str, *results: Any) -> Iterator[AsyncMock]:
    """Patch ``httpx.AsyncClient`` in ``target`` and queue results for ``method``.

    Results may be httpx.Response objects or exceptions to raise.
    """
    with patch(target) as mock_client_cls:
        mock_client = AsyncMock()
        getattr(mock_client, method).side_effect = list(results)
        mock_client.__aenter__ = AsyncMock(return_value=mock_client)
        mock_client.__aexit__ = AsyncMock(return_value=False)
        mock_client_cls.return_value = mock_client
        yield mock_client
