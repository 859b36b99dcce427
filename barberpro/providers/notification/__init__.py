"""
Notification providers.
"""

from .desktop_notification import DesktopNotificationProvider
from .null_notification import NullNotificationProvider

__all__ = ['DesktopNotificationProvider', 'NullNotificationProvider']
