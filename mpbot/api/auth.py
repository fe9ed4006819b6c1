"""OAuth client-credentials token authority for the MessengerPeople API.

The token is obtained lazily on the first inbound message and kept for the
lifetime of the process. There is no refresh: a token that stops working
surfaces as an API request failure.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

import httpx

from mpbot.api.errors import AuthorizationFailure, extract_error_message
from mpbot.models import AccessToken

DEFAULT_AUTH_URL = "https://auth.messengerpeople.dev"

# This bot only sends messages.
BASE_SCOPES: tuple[str, ...] = ("messages:send",)


class TokenAuthority:
    """Acquires and caches a single access token.

    Concurrent first callers are serialized on a lock, so at most one token
    request is in flight and every waiter observes its result.
    """

    def __init__(
        self,
        auth_url: str = DEFAULT_AUTH_URL,
        base_scopes: Sequence[str] = BASE_SCOPES,
        logger: logging.Logger | None = None,
    ) -> None:
        self._auth_url = auth_url.rstrip("/")
        self._base_scopes = tuple(base_scopes)
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._token: AccessToken | None = None
        self._lock = asyncio.Lock()

    @property
    def token(self) -> AccessToken | None:
        return self._token

    @property
    def is_authorized(self) -> bool:
        return self._token is not None

    async def authorize(
        self,
        client_id: str,
        client_secret: str,
        extra_scopes: Sequence[str] = (),
    ) -> None:
        """Obtain an access token unless one is already cached."""
        if self._token is not None:
            return

        async with self._lock:
            # Another caller may have finished while we waited.
            if self._token is not None:
                return
            self._token = await self._request_token(client_id, client_secret, extra_scopes)

        self._logger.info("Authorized successfully")

    async def _request_token(
        self,
        client_id: str,
        client_secret: str,
        extra_scopes: Sequence[str],
    ) -> AccessToken:
        url = f"{self._auth_url}/token"
        body = {
            "grant_type": "client_credentials",
            "scope": [*self._base_scopes, *extra_scopes],
            "client_id": client_id,
            "client_secret": client_secret,
        }

        try:
            async with httpx.AsyncClient() as client:
                resp = await client.post(url, json=body)
                resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            message, hint = extract_error_message(exc)
            raise AuthorizationFailure("Failed to authorize", detail=message, hint=hint) from exc

        try:
            data = resp.json()
        except ValueError:
            data = None

        if not isinstance(data, dict) or not data.get("access_token"):
            raise AuthorizationFailure(
                "Authorization server returned an invalid response",
                detail="Access token missing from response",
            )

        return AccessToken(value=str(data["access_token"]))
