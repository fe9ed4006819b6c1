"""Bot configuration from a JSON file with environment overrides."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from mpbot.api.auth import DEFAULT_AUTH_URL
from mpbot.api.client import DEFAULT_API_URL

DEFAULT_CONFIG_PATH = "config.json"

# Values shipped in config/config.example.json
PLACEHOLDER_VERIFICATION_TOKEN = "change-me"
PLACEHOLDER_CLIENT_ID = "your-client-id"

SETUP_HELP = """
  Please update the configuration first and insert your details,
  otherwise the application won't connect to the API.

  To obtain your OAuth credentials and create the webhook, please
  log in to the dashboard at https://app.messengerpeople.dev and
  configure your account.

  If you need help, please contact our support at api@messengerpeople.dev.
"""

# env var -> (section, key); section None means top level
_ENV_OVERRIDES: dict[str, tuple[str | None, str]] = {
    "MPBOT_VERIFICATION_TOKEN": (None, "verificationToken"),
    "MPBOT_SECRET": (None, "secret"),
    "MPBOT_SENDER_ID": (None, "senderId"),
    "MPBOT_CLIENT_ID": ("auth", "clientId"),
    "MPBOT_CLIENT_SECRET": ("auth", "clientSecret"),
    "MPBOT_API_URL": (None, "apiUrl"),
    "MPBOT_AUTH_URL": (None, "authUrl"),
    "MPBOT_HOST": (None, "host"),
    "MPBOT_PORT": (None, "port"),
}


class ConfigError(ValueError):
    """Raised when the configuration is missing, malformed or not filled in."""


class AuthCredentials(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    client_id: str = Field(alias="clientId", min_length=1)
    client_secret: str = Field(alias="clientSecret", min_length=1)


class BotConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    verification_token: str = Field(alias="verificationToken", min_length=1)
    secret: str = Field(min_length=1)
    sender_id: str = Field(alias="senderId", min_length=1)
    auth: AuthCredentials
    api_url: str = Field(default=DEFAULT_API_URL, alias="apiUrl")
    auth_url: str = Field(default=DEFAULT_AUTH_URL, alias="authUrl")
    host: str = "localhost"
    port: int = Field(default=3000, ge=1, le=65535)

    def public_view(self) -> dict[str, Any]:
        """Settings that are safe to print."""
        return {
            "senderId": self.sender_id,
            "clientId": self.auth.client_id,
            "apiUrl": self.api_url,
            "authUrl": self.auth_url,
            "host": self.host,
            "port": self.port,
        }


def load_config(path: str | Path, overrides: dict[str, str] | None = None) -> BotConfig:
    """Read and validate a JSON config file.

    ``overrides`` maps env-var names (see ``_ENV_OVERRIDES``) to values.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        raw = json.loads(config_path.read_text())
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file is not valid JSON: {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file must contain a JSON object: {path}")

    _apply_overrides(raw, overrides or {})

    try:
        return BotConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}:\n{exc}") from exc


def load_config_from_env(path: str | None = None) -> BotConfig:
    """Load the config file named by ``MPBOT_CONFIG`` and apply MPBOT_* overrides."""
    config_path = path or os.environ.get("MPBOT_CONFIG", DEFAULT_CONFIG_PATH)
    overrides = {name: os.environ[name] for name in _ENV_OVERRIDES if name in os.environ}
    return load_config(config_path, overrides)


def ensure_configured(config: BotConfig) -> None:
    """Refuse to start with the placeholder credentials from the example file."""
    if (
        config.verification_token == PLACEHOLDER_VERIFICATION_TOKEN
        or config.auth.client_id == PLACEHOLDER_CLIENT_ID
    ):
        raise ConfigError(SETUP_HELP)


def _apply_overrides(raw: dict[str, Any], overrides: dict[str, str]) -> None:
    for name, value in overrides.items():
        if name not in _ENV_OVERRIDES:
            continue
        section, key = _ENV_OVERRIDES[name]
        if section is None:
            raw[key] = value
            continue
        target = raw.get(section)
        if not isinstance(target, dict):
            target = {}
            raw[section] = target
        target[key] = value
