"""Canned-reply dispatcher for inbound messages."""

from __future__ import annotations

import re
from typing import Any

from mpbot.models import Intent, ReplyPayload

GREETING_REPLY = "Hey there, bot user!"
INFO_REPLY = (
    "This is a sample bot, demonstrating the MessengerPeople API. "
    "Try to _ping_ it, or ask it to _repeat_ you."
)
PING_REPLY = "pong"
REPEAT_PREFIX = "You said:\n"

_KEYWORDS: dict[str, Intent] = {
    "hi": Intent.GREETING,
    "hello": Intent.GREETING,
    "hey": Intent.GREETING,
    "help": Intent.INFO,
    "info": Intent.INFO,
    "about": Intent.INFO,
    "ping": Intent.PING,
    "repeat": Intent.REPEAT,
    "space": Intent.SPACE,
}

# "repeat", "repeat:" or "repeat: " at the start, followed by the text to echo
_REPEAT_PATTERN = re.compile(r"^repeat(?::|\s|$)\s*", re.IGNORECASE)


def message_text(event: dict[str, Any]) -> str | None:
    payload = event.get("payload")
    if not isinstance(payload, dict):
        return None
    text = payload.get("text")
    return text if isinstance(text, str) else None


def classify(text: str | None) -> Intent:
    """Map raw message text to an intent. Matching is case-insensitive."""
    if text is None:
        return Intent.UNKNOWN
    normalized = text.strip().lower()
    intent = _KEYWORDS.get(normalized)
    if intent is not None:
        return intent
    if _REPEAT_PATTERN.match(normalized):
        return Intent.REPEAT
    return Intent.UNKNOWN


def reply_for(intent: Intent, text: str | None) -> ReplyPayload | None:
    if intent is Intent.GREETING:
        return ReplyPayload(text=GREETING_REPLY)
    if intent is Intent.INFO:
        return ReplyPayload(text=INFO_REPLY)
    if intent is Intent.PING:
        return ReplyPayload(text=PING_REPLY)
    if intent is Intent.REPEAT:
        echoed = _REPEAT_PATTERN.sub("", (text or "").strip(), count=1)
        return ReplyPayload(text=REPEAT_PREFIX + echoed)
    # SPACE is a known keyword without a reply yet; it stays silent like UNKNOWN.
    return None


class ReplyDispatcher:
    """Turns an inbound message event into the reply to send, if any."""

    def handle(self, event: dict[str, Any]) -> ReplyPayload | None:
        text = message_text(event)
        return reply_for(classify(text), text)
