"""
Local key-value store providers.
"""

from .json_file_store import JsonFileStore
from .memory_store import MemoryKeyValueStore

__all__ = ['JsonFileStore', 'MemoryKeyValueStore']
