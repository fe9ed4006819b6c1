"""Webhook gateway: validates inbound webhook calls and relays bot replies.

Request flow for both endpoints:
1. Reject empty bodies (400)
2. Secured endpoint only: check the shared secret in the Authorization header (401)
3. Verification handshake: echo the challenge if the token matches (200 / 403)
4. Message: authorize, dispatch, send the reply (204 / 500)

The platform expects a message to be handled within 10 seconds. That limit is
not enforced here.
"""

from __future__ import annotations

import hmac
import logging
from typing import TYPE_CHECKING, Any

from mpbot.api.errors import BotError, format_error
from mpbot.models import ErrorKind, OutboundMessage, VerificationChallenge
from mpbot.webhook.models import WebhookResponse

if TYPE_CHECKING:
    from mpbot.api.auth import TokenAuthority
    from mpbot.api.client import OutboundApiClient
    from mpbot.bot.dispatcher import ReplyDispatcher
    from mpbot.config import BotConfig

_BEARER_PREFIX = "Bearer "
_CHALLENGE_HEADERS = {"WWW-Authenticate": "Bearer"}

_ERROR_TEXT = {
    ErrorKind.BAD_REQUEST: "Bad request",
    ErrorKind.BAD_VERIFICATION_TOKEN: "Bad verification token",
}


class WebhookGateway:
    """Handles the public and the secret-protected message webhooks."""

    def __init__(
        self,
        config: BotConfig,
        authority: TokenAuthority,
        client: OutboundApiClient,
        dispatcher: ReplyDispatcher,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._authority = authority
        self._client = client
        self._dispatcher = dispatcher
        self._logger = logger if logger is not None else logging.getLogger(__name__)

    async def handle_public(self, body: Any) -> WebhookResponse:
        """Unauthenticated webhook; anyone who knows the URL can post to it."""
        if not _is_non_empty_object(body):
            return _error(400, ErrorKind.BAD_REQUEST)
        return await self._process(body)

    async def handle_secured(self, body: Any, authorization: str | None) -> WebhookResponse:
        """Webhook that requires ``Authorization: Bearer <secret>``."""
        if not _is_non_empty_object(body):
            return _error(400, ErrorKind.BAD_REQUEST)

        rejection = self.check_secret(authorization)
        if rejection is not None:
            return rejection
        return await self._process(body)

    def check_secret(self, authorization: str | None) -> WebhookResponse | None:
        """Return a 401 response if the header does not carry the secret."""
        if not authorization:
            return WebhookResponse(
                status_code=401,
                body={"error": "Not authorized"},
                headers=dict(_CHALLENGE_HEADERS),
            )

        secret = authorization.removeprefix(_BEARER_PREFIX)
        if not hmac.compare_digest(secret.encode(), self._config.secret.encode()):
            return WebhookResponse(
                status_code=401,
                body={"error": "Bad credentials"},
                headers=dict(_CHALLENGE_HEADERS),
            )
        return None

    def verify(self, challenge: VerificationChallenge) -> WebhookResponse:
        if challenge.token != self._config.verification_token:
            return _error(403, ErrorKind.BAD_VERIFICATION_TOKEN)
        # An absent challenge is left out of the echo rather than sent as null
        body = {} if challenge.challenge is None else {"challenge": challenge.challenge}
        return WebhookResponse(status_code=200, body=body)

    async def _process(self, body: dict[str, Any]) -> WebhookResponse:
        if "verification_token" in body:
            return self.verify(VerificationChallenge.from_event(body))

        try:
            await self._dispatch(body)
        except BotError as exc:
            message = format_error(exc)
            self._logger.error(message, extra={"error_kind": exc.kind.value})
            return WebhookResponse(status_code=500, body={"error": message})
        except Exception as exc:
            message = str(exc) or exc.__class__.__name__
            self._logger.error(message, exc_info=exc)
            return WebhookResponse(status_code=500, body={"error": message})

        return WebhookResponse(status_code=204)

    async def _dispatch(self, body: dict[str, Any]) -> None:
        auth = self._config.auth
        await self._authority.authorize(auth.client_id, auth.client_secret)

        payload = self._dispatcher.handle(body)
        message = OutboundMessage.reply_to(self._config.sender_id, body.get("sender"), payload)
        await self._client.send(message)


def _is_non_empty_object(body: Any) -> bool:
    return isinstance(body, dict) and len(body) > 0


def _error(status_code: int, kind: ErrorKind) -> WebhookResponse:
    return WebhookResponse(status_code=status_code, body={"error": _ERROR_TEXT[kind]})
