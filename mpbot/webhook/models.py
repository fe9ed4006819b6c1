"""Data models for the webhook gateway."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class WebhookResponse:
    """Gateway outcome to render back to the messaging platform."""

    status_code: int
    body: dict[str, Any] | None = None  # None means an empty response body
    headers: dict[str, str] = field(default_factory=dict)
