"""
Abstract interfaces for the barbershop framework collaborators.
"""

from .notification import NotificationInterface
from .audio import AudioAlertInterface
from .remote_store import RemoteStoreInterface, RemoteStoreError
from .local_store import KeyValueStoreInterface

__all__ = [
    'NotificationInterface',
    'AudioAlertInterface',
    'RemoteStoreInterface',
    'RemoteStoreError',
    'KeyValueStoreInterface'
]
