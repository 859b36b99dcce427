"""
Abstract interface for remote backup stores.
Holds one upsertable record per owner with every entity collection.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional


class RemoteStoreError(Exception):
    """Raised when the remote store rejects or fails an operation."""


class RemoteStoreInterface(ABC):
    """Abstract base class for all remote store providers."""

    @abstractmethod
    async def initialize(self) -> bool:
        """
        Initialize the store connection.

        Returns:
            bool: True if initialization successful
        """
        pass

    @abstractmethod
    async def fetch(self, owner_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the record for an owner.

        Returns:
            The stored record, or None if the owner has none

        Raises:
            RemoteStoreError: On transport or store failure
        """
        pass

    @abstractmethod
    async def upsert(self, owner_id: str, record: Dict[str, Any]) -> None:
        """
        Insert or replace the record for an owner.

        Raises:
            RemoteStoreError: On transport or store failure
        """
        pass

    @abstractmethod
    async def delete(self, owner_id: str) -> None:
        """
        Remove the record for an owner.

        Raises:
            RemoteStoreError: On transport or store failure
        """
        pass

    def is_available(self) -> bool:
        """Check if the store is ready for use."""
        return True
