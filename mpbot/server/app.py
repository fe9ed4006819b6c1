"""FastAPI application exposing the bot webhooks."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from mpbot.api.auth import TokenAuthority
from mpbot.api.client import OutboundApiClient
from mpbot.bot.dispatcher import ReplyDispatcher
from mpbot.config import BotConfig, load_config_from_env
from mpbot.server.request_logging import RequestLoggingMiddleware
from mpbot.webhook.gateway import WebhookGateway
from mpbot.webhook.models import WebhookResponse

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"

PUBLIC_WEBHOOK_PATH = "/webhooks/message"
SECURE_WEBHOOK_PATH = "/secure-webhooks/message"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Send log records to stderr, each line prefixed with a timestamp."""
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from MPBOT_* environment variables."""
    return create_app(load_config_from_env())


def create_app(
    config: BotConfig,
    authority: TokenAuthority | None = None,
    client: OutboundApiClient | None = None,
    dispatcher: ReplyDispatcher | None = None,
    logger: logging.Logger | None = None,
) -> FastAPI:
    """Create the bot app. Collaborators default to ones built from ``config``."""
    authority = authority or TokenAuthority(auth_url=config.auth_url, logger=logger)
    client = client or OutboundApiClient(authority, api_url=config.api_url)
    gateway = WebhookGateway(
        config,
        authority,
        client,
        dispatcher or ReplyDispatcher(),
        logger=logger,
    )

    app = FastAPI(docs_url=None, redoc_url=None)
    app.state.gateway = gateway

    @app.get("/")
    async def status() -> dict[str, str]:
        # Not called by the platform; useful for your own health checks.
        return {"status": "ok"}

    @app.post(PUBLIC_WEBHOOK_PATH)
    async def public_webhook(request: Request) -> Response:
        body = await _read_json(request)
        return _render(await gateway.handle_public(body))

    @app.post(SECURE_WEBHOOK_PATH)
    async def secure_webhook(request: Request) -> Response:
        body = await _read_json(request)
        result = await gateway.handle_secured(body, request.headers.get("authorization"))
        return _render(result)

    app.add_middleware(RequestLoggingMiddleware)

    return app


async def _read_json(request: Request) -> Any:
    """Decode the request body; anything that is not JSON counts as empty."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}


def _render(result: WebhookResponse) -> Response:
    if result.body is None:
        return Response(status_code=result.status_code, headers=result.headers)
    return JSONResponse(result.body, status_code=result.status_code, headers=result.headers)
