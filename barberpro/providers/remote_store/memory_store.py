"""
In-process remote store for offline runs and tests.
"""

import copy
from typing import Dict, Any, Optional

from ...interfaces.remote_store import RemoteStoreInterface


class InMemoryRemoteStore(RemoteStoreInterface):
    """Keeps owner records in a dict; records are copied on the way in and out."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.records: Dict[str, Dict[str, Any]] = {}
        self.upsert_count = 0

    async def initialize(self) -> bool:
        return True

    async def fetch(self, owner_id: str) -> Optional[Dict[str, Any]]:
        record = self.records.get(owner_id)
        return copy.deepcopy(record) if record is not None else None

    async def upsert(self, owner_id: str, record: Dict[str, Any]) -> None:
        stored = copy.deepcopy(record)
        stored["user_id"] = owner_id
        self.records[owner_id] = stored
        self.upsert_count += 1

    async def delete(self, owner_id: str) -> None:
        self.records.pop(owner_id, None)
