from __future__ import annotations

import json
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from types import TracebackType
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from ..config import DEFAULT_TOKEN_URL, IamSettings
from ..errors import AuthError, HttpError
from ..models.token import TokenInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenResponse:
    """Outcome of a single grant request.

    ``token`` is only populated for 2xx responses; ``details`` holds the decoded
    error body otherwise.
    """

    status_code: int
    reason: str = ""
    token: TokenInfo | None = None
    details: Any | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class TokenEndpointClient(Protocol):
    def post_token(self, body: Mapping[str, str]) -> TokenResponse: ...


class IamTokenClient:
    """Form-encoded POSTs against the IAM token endpoint over httpx."""

    def __init__(
        self,
        token_url: str = DEFAULT_TOKEN_URL,
        *,
        basic_auth: str | None = None,
        timeout: float = 60.0,
        max_retries: int = 0,
        backoff_factor: float = 0.5,
    ) -> None:
        self.token_url = token_url
        self._basic_auth = basic_auth or IamSettings().basic_auth_header
        self._client = httpx.Client(timeout=timeout)
        self._max_retries = max_retries
        self._backoff_factor = backoff_factor

    @classmethod
    def from_settings(cls, settings: IamSettings) -> IamTokenClient:
        return cls(
            settings.token_url,
            basic_auth=settings.basic_auth_header,
            timeout=settings.timeout,
            max_retries=settings.max_retries,
            backoff_factor=settings.backoff_factor,
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/x-www-form-urlencoded",
            "Authorization": self._basic_auth,
        }

    def post_token(self, body: Mapping[str, str]) -> TokenResponse:
        attempt = 0
        while True:
            try:
                resp = self._client.post(self.token_url, data=dict(body), headers=self._headers())
            except httpx.TransportError as e:
                if attempt < self._max_retries:
                    time.sleep(self._backoff_factor * (2**attempt))
                    attempt += 1
                    continue
                raise HttpError(0, f"Transport error: {e}") from e
            break

        if not 200 <= resp.status_code < 300:
            try:
                detail = resp.json()
            except Exception:
                detail = resp.text
            logger.debug("Token endpoint answered %s %s", resp.status_code, resp.reason_phrase)
            return TokenResponse(resp.status_code, resp.reason_phrase, details=detail)

        try:
            token = TokenInfo.model_validate(resp.json())
        except (json.JSONDecodeError, ValidationError) as exc:
            raise AuthError(
                f"Token endpoint returned an invalid token payload (HTTP {resp.status_code})"
            ) from exc
        if not token.access_token:
            raise AuthError(
                f"Token endpoint response has no access_token (HTTP {resp.status_code})"
            )
        return TokenResponse(resp.status_code, resp.reason_phrase, token=token)

    def close(self) -> None:
        """Close the underlying :class:`httpx.Client`."""

        self._client.close()

    def __enter__(self) -> IamTokenClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
