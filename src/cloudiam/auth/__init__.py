from __future__ import annotations

from .base import TokenProvider
from .token_manager import TokenManager

__all__ = ["TokenManager", "TokenProvider"]
