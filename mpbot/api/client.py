"""Authenticated client for the MessengerPeople messaging API."""

from __future__ import annotations

from typing import Any

import httpx

from mpbot.api.auth import TokenAuthority
from mpbot.api.errors import ApiRequestFailure, NotAuthorized, extract_error_message
from mpbot.models import OutboundMessage

DEFAULT_API_URL = "https://api.messengerpeople.dev"


class OutboundApiClient:
    """Issues API calls with the token held by a TokenAuthority.

    The client only reads the token; obtaining it is the caller's job.
    """

    def __init__(self, authority: TokenAuthority, api_url: str = DEFAULT_API_URL) -> None:
        self._authority = authority
        self._api_url = api_url.rstrip("/")

    async def request(self, method: str, path: str, json: Any = None) -> Any:
        """Perform one API call and return the decoded JSON body."""
        token = self._authority.token
        if token is None:
            raise NotAuthorized("Not authorized yet")

        url = f"{self._api_url}/{path.lstrip('/')}"
        headers = {
            "Authorization": f"Bearer {token.value}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        try:
            async with httpx.AsyncClient() as client:
                resp = await client.request(method, url, json=json, headers=headers)
                resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            message, hint = extract_error_message(exc)
            raise ApiRequestFailure(f"[API] {url} failed", detail=message, hint=hint) from exc

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise ApiRequestFailure(
                f"[API] {url} failed", detail="Response body is not valid JSON",
            ) from exc

    async def send(self, message: OutboundMessage) -> Any:
        return await self.request("POST", "/messages", json=message.model_dump())
