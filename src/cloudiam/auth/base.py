from __future__ import annotations
from abc import ABC, abstractmethod

class TokenProvider(ABC):
    @abstractmethod
    def get_token(self) -> str:
        """Return a currently valid access token for Authorization: Bearer."""
