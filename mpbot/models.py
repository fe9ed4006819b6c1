"""Shared Pydantic data models for the MessengerPeople sample bot."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# --- Enums ---


class ErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    BAD_VERIFICATION_TOKEN = "bad_verification_token"
    UNAUTHORIZED = "unauthorized"
    AUTHORIZATION_FAILURE = "authorization_failure"
    API_REQUEST_FAILURE = "api_request_failure"
    NOT_AUTHORIZED = "not_authorized"


class Intent(str, Enum):
    """Normalized meaning of an inbound message text."""

    GREETING = "greeting"
    INFO = "info"
    PING = "ping"
    REPEAT = "repeat"
    SPACE = "space"
    UNKNOWN = "unknown"


# --- Auth Models ---


class AccessToken(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str = Field(min_length=1)


# --- Webhook Models ---


class VerificationChallenge(BaseModel):
    """Handshake sent by the platform when a webhook is registered."""

    model_config = ConfigDict(frozen=True)

    token: Any = None
    challenge: Any = None

    @classmethod
    def from_event(cls, event: dict[str, Any]) -> VerificationChallenge:
        return cls(token=event.get("verification_token"), challenge=event.get("challenge"))


# --- Messaging Models ---


class ReplyPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str


class OutboundMessage(BaseModel):
    """Message body posted to the messaging API.

    ``identifier`` is ``"<senderId>:<recipient>"``; the bot is the sender when
    answering the user who wrote to it.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str
    payload: ReplyPayload | None = None

    @classmethod
    def reply_to(
        cls, sender_id: str, recipient: object, payload: ReplyPayload | None,
    ) -> OutboundMessage:
        recipient_id = "" if recipient is None else str(recipient)
        return cls(identifier=f"{sender_id}:{recipient_id}", payload=payload)
