"""
No-op notification provider for headless runs and tests.
"""

from typing import Dict, Any, List, Optional, Tuple

from ...interfaces.notification import NotificationInterface


class NullNotificationProvider(NotificationInterface):
    """
    Records notifications instead of showing them.

    Configuration:
        - grant_permission: Answer permission requests with this value (default: False)
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = config or {}
        self._grant = bool(config.get("grant_permission", False))
        self._permission_granted = False
        self.sent: List[Tuple[str, str]] = []

    @property
    def permission_granted(self) -> bool:
        return self._permission_granted

    async def request_permission(self) -> bool:
        self._permission_granted = self._grant
        return self._permission_granted

    def notify(self, title: str, body: str) -> bool:
        if not self._permission_granted:
            return False
        self.sent.append((title, body))
        return True
