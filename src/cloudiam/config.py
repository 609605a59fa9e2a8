from __future__ import annotations

import base64
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_URL = "https://iam.bluemix.net/identity/token"
DEFAULT_CLIENT_ID = "bx"
DEFAULT_CLIENT_SECRET = "bx"
DEFAULT_REFRESH_BUFFER = 0.8
DEFAULT_REFRESH_TOKEN_LIFETIME = 7 * 24 * 3600

ENV_PREFIX = "CLOUDIAM_"


def _env_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def _env_str(environ: Mapping[str, str], name: str) -> str | None:
    raw = environ.get(name)
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


@dataclass
class IamSettings:
    """Connection and refresh policy for the IAM token endpoint.

    ``access_token`` pins a static token and takes precedence over ``api_key``.
    """

    token_url: str = DEFAULT_TOKEN_URL
    client_id: str = DEFAULT_CLIENT_ID
    client_secret: str = DEFAULT_CLIENT_SECRET
    api_key: str | None = None
    access_token: str | None = None
    timeout: float = 60.0
    max_retries: int = 0
    backoff_factor: float = 0.5
    refresh_buffer: float = DEFAULT_REFRESH_BUFFER
    refresh_token_lifetime: int = DEFAULT_REFRESH_TOKEN_LIFETIME

    def __post_init__(self) -> None:
        if not self.token_url:
            raise ConfigError("token_url must not be empty")
        if not 0.0 < self.refresh_buffer <= 1.0:
            raise ConfigError(
                f"refresh_buffer must be within (0, 1], got {self.refresh_buffer}"
            )
        if self.refresh_token_lifetime < 0:
            raise ConfigError("refresh_token_lifetime must not be negative")
        if self.timeout <= 0:
            raise ConfigError("timeout must be positive")
        if self.max_retries < 0:
            raise ConfigError("max_retries must not be negative")

    @property
    def basic_auth_header(self) -> str:
        raw = f"{self.client_id}:{self.client_secret}".encode("utf-8")
        return f"Basic {base64.b64encode(raw).decode('ascii')}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> IamSettings:
        """Build settings from ``CLOUDIAM_*`` environment variables."""

        env = os.environ if environ is None else environ
        settings = cls(
            token_url=_env_str(env, f"{ENV_PREFIX}TOKEN_URL") or DEFAULT_TOKEN_URL,
            client_id=_env_str(env, f"{ENV_PREFIX}CLIENT_ID") or DEFAULT_CLIENT_ID,
            client_secret=_env_str(env, f"{ENV_PREFIX}CLIENT_SECRET") or DEFAULT_CLIENT_SECRET,
            api_key=_env_str(env, f"{ENV_PREFIX}API_KEY"),
            access_token=_env_str(env, f"{ENV_PREFIX}ACCESS_TOKEN"),
            timeout=_env_float(env, f"{ENV_PREFIX}TIMEOUT", 60.0),
            max_retries=_env_int(env, f"{ENV_PREFIX}MAX_RETRIES", 0),
        )
        logger.debug("Loaded IAM settings for %s from environment", settings.token_url)
        return settings
