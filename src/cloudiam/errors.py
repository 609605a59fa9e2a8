from __future__ import annotations

from typing import Any, Optional


class CloudIamError(Exception):
    """Base error for cloudiam."""


class AuthError(CloudIamError):
    pass


class ConfigError(CloudIamError):
    pass


class HttpError(CloudIamError):
    def __init__(self, status_code: int, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.details = details
