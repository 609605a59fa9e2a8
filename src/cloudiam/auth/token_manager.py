from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from ..clients.iam import IamTokenClient, TokenEndpointClient
from ..config import IamSettings
from ..errors import AuthError, HttpError
from ..models.token import TokenInfo
from .base import TokenProvider

logger = logging.getLogger(__name__)

APIKEY_GRANT_TYPE = "urn:ibm:params:oauth:grant-type:apikey"
REFRESH_GRANT_TYPE = "refresh_token"


class TokenManager(TokenProvider):
    """Caches an IAM access token and renews it on demand.

    A token pinned with :meth:`set_token` is returned verbatim. Otherwise the
    manager acquires a token with the API key, renews it with the refresh token
    once ``settings.refresh_buffer`` (80% by default) of its validity window has
    elapsed, and falls back to the API key
    when the refresh token is past its assumed lifetime. Renewal only happens
    inside :meth:`get_token`; there is no background refresh.

    Calls on one instance are serialised by a lock held across the network
    request, so concurrent callers trigger at most one grant at a time.
    """

    def __init__(
        self,
        settings: IamSettings | None = None,
        *,
        client: TokenEndpointClient | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.settings = settings or IamSettings()
        self._client = client
        self._owns_client = client is None
        self._clock = clock
        self._lock = threading.RLock()
        self._user_token = ""
        self._api_key = ""
        self._token_info = TokenInfo()
        if self.settings.access_token:
            self.set_token(self.settings.access_token)
        if self.settings.api_key:
            self.set_key(self.settings.api_key)

    @property
    def token_info(self) -> TokenInfo:
        return self._token_info

    def set_token(self, token: str) -> None:
        """Pin ``token`` so it is returned as-is and never refreshed."""

        with self._lock:
            self._user_token = token

    def set_key(self, key: str) -> None:
        """Set the API key used for key grants."""

        with self._lock:
            self._api_key = key

    def get_token(self) -> str:
        with self._lock:
            if self._user_token:
                return self._user_token

            if not self._token_info.access_token:
                self._post_token(self._request_token_body())

            # Evaluated even right after an initial acquisition above.
            if self._is_token_expired():
                if self._is_refresh_token_expired():
                    logger.info(
                        "Refresh token past its lifetime; requesting a new token with the API key"
                    )
                    self._post_token(self._request_token_body())
                else:
                    self._post_token(self._refresh_token_body())
            else:
                logger.debug("Using cached IAM access token")

            return self._token_info.access_token

    def close(self) -> None:
        if self._owns_client and isinstance(self._client, IamTokenClient):
            self._client.close()
            self._client = None

    def _endpoint(self) -> TokenEndpointClient:
        if self._client is None:
            self._client = IamTokenClient.from_settings(self.settings)
        return self._client

    def _request_token_body(self) -> dict[str, str]:
        if not self._api_key:
            raise AuthError("No API key configured; call set_key() or set_token() first.")
        return {
            "grant_type": APIKEY_GRANT_TYPE,
            "apikey": self._api_key,
            "response_type": "cloud_iam",
        }

    def _refresh_token_body(self) -> dict[str, str]:
        return {
            "grant_type": REFRESH_GRANT_TYPE,
            "refresh_token": self._token_info.refresh_token or "",
        }

    def _post_token(self, body: dict[str, str]) -> None:
        grant_type = body["grant_type"]
        try:
            response = self._endpoint().post_token(body)
        except HttpError as exc:
            logger.warning("Token request (%s) failed: %s", grant_type, exc)
            raise
        if not response.ok or response.token is None:
            logger.warning(
                "Token request (%s) rejected with HTTP %s", grant_type, response.status_code
            )
            raise HttpError(
                response.status_code,
                response.reason or "Token request failed",
                details=response.details,
            )
        self._token_info = response.token
        logger.debug("Token grant %s succeeded", grant_type)

    def _is_token_expired(self) -> bool:
        refresh_at = self._token_info.refresh_at(self.settings.refresh_buffer)
        return refresh_at < self._clock()

    def _is_refresh_token_expired(self) -> bool:
        expires_at = self._token_info.refresh_token_expires_at(
            self.settings.refresh_token_lifetime
        )
        return expires_at < self._clock()
