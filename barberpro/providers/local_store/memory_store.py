"""
Volatile key-value store for tests and throwaway sessions.
"""

import copy
from typing import Any, Dict, Optional

from ...interfaces.local_store import KeyValueStoreInterface


class MemoryKeyValueStore(KeyValueStoreInterface):

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.data: Dict[str, Any] = {}

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        if key not in self.data:
            return default
        return copy.deepcopy(self.data[key])

    def set(self, key: str, value: Any) -> None:
        self.data[key] = copy.deepcopy(value)

    def remove(self, key: str) -> None:
        self.data.pop(key, None)
