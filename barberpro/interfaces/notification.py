"""
Abstract interface for OS-level notification providers.
"""

from abc import ABC, abstractmethod


class NotificationInterface(ABC):
    """Abstract base class for all notification providers."""

    @abstractmethod
    async def request_permission(self) -> bool:
        """
        Ask the platform for permission to raise notifications.

        Returns:
            bool: True if notifications may be raised
        """
        pass

    @property
    @abstractmethod
    def permission_granted(self) -> bool:
        """Whether a previous request was granted."""
        pass

    @abstractmethod
    def notify(self, title: str, body: str) -> bool:
        """
        Raise a system-level notification.

        Args:
            title: Notification title
            body: Notification body

        Returns:
            bool: True if the notification was handed to the platform (delivery
                  may still fail asynchronously)
        """
        pass
