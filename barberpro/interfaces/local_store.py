"""
Abstract interface for the local key-value store.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class KeyValueStoreInterface(ABC):
    """Abstract base class for local key-value persistence."""

    @abstractmethod
    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Return the JSON value stored under ``key`` or ``default``."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a JSON-serialisable value under ``key``."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``; missing keys are ignored."""
        pass
