"""
Provider implementations for the barbershop framework.
"""

from .notification import DesktopNotificationProvider, NullNotificationProvider
from .audio import SystemToneProvider, NullAudioProvider
from .remote_store import SupabaseUserDataStore, InMemoryRemoteStore
from .local_store import JsonFileStore, MemoryKeyValueStore

__all__ = [
    'DesktopNotificationProvider',
    'NullNotificationProvider',
    'SystemToneProvider',
    'NullAudioProvider',
    'SupabaseUserDataStore',
    'InMemoryRemoteStore',
    'JsonFileStore',
    'MemoryKeyValueStore'
]
