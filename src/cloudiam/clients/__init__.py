from __future__ import annotations

from .iam import IamTokenClient, TokenEndpointClient, TokenResponse

__all__ = ["IamTokenClient", "TokenEndpointClient", "TokenResponse"]
