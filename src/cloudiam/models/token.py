"""Pydantic model for the IAM token endpoint response."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TokenInfo(BaseModel):
    """Token record issued by the identity provider.

    An empty ``access_token`` means no token has been acquired yet. Instances are
    frozen: a renewal replaces the whole record instead of updating fields.
    """

    access_token: str = ""
    refresh_token: str | None = None
    token_type: str | None = None
    expires_in: int = Field(default=0, description="Seconds of validity from issuance.")
    expiration: int = Field(default=0, description="Absolute expiry as a Unix timestamp.")

    model_config = ConfigDict(frozen=True, extra="ignore")

    def refresh_at(self, buffer: float) -> float:
        """Return the Unix time after which the access token is due for renewal.

        ``buffer`` is the fraction of the validity window treated as fresh, so the
        threshold sits ``expires_in * (1 - buffer)`` seconds before ``expiration``.
        """

        return self.expiration - self.expires_in * (1.0 - buffer)

    def refresh_token_expires_at(self, lifetime: int) -> int:
        """Return the Unix time after which the refresh token is assumed unusable."""

        return self.expiration + lifetime
