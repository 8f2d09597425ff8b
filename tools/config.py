"""
Settings — environment-backed configuration for the power bot.

Values come from the process environment (optionally seeded from a .env
file via python-dotenv) and are read once at startup. The settings object
is treated as read-only for the lifetime of the process.
"""

import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

from tools.errors import ConfigurationError
from tools.models import InstanceDescriptor

# Legacy hardcoded target, kept as defaults so an unconfigured bot behaves as before
DEFAULT_INSTANCE_NAME = "palworld1"
DEFAULT_INSTANCE_PROJECT = "droprealms"
DEFAULT_INSTANCE_ZONE = "asia-northeast1-b"


class BotSettings(BaseModel):
    """Process-wide configuration."""
    discord_token: Optional[str] = None
    api_base_url: Optional[str] = None
    instance: InstanceDescriptor = InstanceDescriptor(
        name=DEFAULT_INSTANCE_NAME,
        project=DEFAULT_INSTANCE_PROJECT,
        zone=DEFAULT_INSTANCE_ZONE,
    )
    game_port: int = 8211
    server_label: str = "Palworld"
    poll_interval: float = 5.0
    poll_timeout: Optional[float] = 600.0  # None = poll forever
    http_timeout: Optional[float] = 30.0  # None = no request timeout
    ops_log_channel_id: Optional[int] = None
    log_level: str = "INFO"

    model_config = {"frozen": True}

    @field_validator('poll_interval')
    @classmethod
    def validate_interval(cls, v):
        if v <= 0:
            raise ValueError('must be positive')
        return v

    @field_validator('game_port')
    @classmethod
    def validate_port(cls, v):
        if not 0 < v < 65536:
            raise ValueError('must be a TCP port number')
        return v

    def require_token(self) -> str:
        if not self.discord_token:
            raise ConfigurationError("DISCORD_TOKEN is not set in the environment.")
        return self.discord_token


def _optional_seconds(env: Mapping[str, str], key: str, default: float) -> Optional[float]:
    """Parse a seconds value where 0 (or negative) disables the limit."""
    raw = env.get(key, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}") from e
    return value if value > 0 else None


def settings_from_env(env: Mapping[str, str]) -> BotSettings:
    """Build settings from an environment mapping.

    Raises:
        ConfigurationError: a value is present but malformed.
    """
    ops_channel = env.get("OPS_LOG_CHANNEL_ID", "").strip()
    try:
        instance = InstanceDescriptor(
            name=env.get("INSTANCE_NAME", DEFAULT_INSTANCE_NAME),
            project=env.get("INSTANCE_PROJECT", DEFAULT_INSTANCE_PROJECT),
            zone=env.get("INSTANCE_ZONE", DEFAULT_INSTANCE_ZONE),
        )
        return BotSettings(
            discord_token=env.get("DISCORD_TOKEN") or None,
            api_base_url=env.get("GCP_API") or None,
            instance=instance,
            game_port=env.get("GAME_PORT", "8211"),
            server_label=env.get("SERVER_LABEL", "Palworld"),
            poll_interval=env.get("POLL_INTERVAL_SECONDS", "5"),
            poll_timeout=_optional_seconds(env, "POLL_TIMEOUT_SECONDS", 600.0),
            http_timeout=_optional_seconds(env, "HTTP_TIMEOUT_SECONDS", 30.0),
            ops_log_channel_id=ops_channel or None,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )
    except ValidationError as e:
        field_errors = []
        for err in e.errors():
            loc = ".".join(str(p) for p in err["loc"])
            field_errors.append(f"{loc}: {err['msg']}")
        raise ConfigurationError("Invalid configuration: " + "; ".join(field_errors)) from e


def load_settings(dotenv_path: Optional[str] = None) -> BotSettings:
    """Load .env (if present) and read settings from os.environ."""
    load_dotenv(dotenv_path)
    return settings_from_env(os.environ)
