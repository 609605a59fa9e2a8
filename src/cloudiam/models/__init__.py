from __future__ import annotations

from .token import TokenInfo

__all__ = ["TokenInfo"]
