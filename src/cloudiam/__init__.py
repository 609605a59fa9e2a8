"""IAM bearer-token acquisition and renewal for cloud API clients."""

from __future__ import annotations

from .auth.base import TokenProvider
from .auth.token_manager import TokenManager
from .clients.iam import IamTokenClient, TokenEndpointClient, TokenResponse
from .config import IamSettings
from .errors import AuthError, CloudIamError, ConfigError, HttpError
from .models.token import TokenInfo

__all__ = [
    "AuthError",
    "CloudIamError",
    "ConfigError",
    "HttpError",
    "IamSettings",
    "IamTokenClient",
    "TokenEndpointClient",
    "TokenInfo",
    "TokenManager",
    "TokenProvider",
    "TokenResponse",
]
