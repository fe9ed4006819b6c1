"""ASGI middleware that writes one log line per inbound request."""

from __future__ import annotations

import logging

from starlette.requests import Request
from starlette.types import ASGIApp, Receive, Scope, Send

REQUEST_LOGGER = "mpbot.request"


class RequestLoggingMiddleware:
    """Logs ``<client ip>\\t<METHOD> <path>`` before the request is handled."""

    def __init__(self, app: ASGIApp, logger: logging.Logger | None = None) -> None:
        self.app = app
        self._logger = logger if logger is not None else logging.getLogger(REQUEST_LOGGER)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        client_ip = request.client.host if request.client else "-"
        self._logger.info("%s\t%s %s", client_ip, request.method, request.url.path)

        await self.app(scope, receive, send)
