"""
Supabase remote store provider.
Keeps one row per owner in the ``user_data`` table.

Required Supabase setup (run in the Supabase SQL editor):

CREATE TABLE user_data (
    user_id UUID PRIMARY KEY,
    services JSONB DEFAULT '[]',
    barbers JSONB DEFAULT '[]',
    appointments JSONB DEFAULT '[]',
    cuts JSONB DEFAULT '[]',
    transactions JSONB DEFAULT '[]',
    bills JSONB DEFAULT '[]',
    fiados JSONB DEFAULT '[]',
    monthly_plans JSONB DEFAULT '[]',
    created_at TIMESTAMPTZ DEFAULT NOW(),
    updated_at TIMESTAMPTZ DEFAULT NOW()
);
"""

import asyncio
from datetime import datetime, timezone
from typing import Dict, Any, Optional

try:
    from supabase import create_client, Client
except ImportError:
    create_client = None
    Client = None

from ...config_models import SupabaseConfig
from ...interfaces.remote_store import RemoteStoreInterface, RemoteStoreError
from ...utils.logging_config import get_logger


class SupabaseUserDataStore(RemoteStoreInterface):
    """
    Supabase implementation of the remote backup store.

    Configuration:
        - url: Supabase project URL
        - key: Supabase API key
        - table_name: Table name (default: user_data)
        - owner_column: Primary key column (default: user_id)
    """

    def __init__(self, config: Dict[str, Any]):
        if create_client is None:
            raise ImportError("supabase library required. Install with: pip install supabase")

        settings = SupabaseConfig(**config)
        if not settings.url or not settings.key:
            raise ValueError("Supabase URL and key are required")

        self.url = settings.url
        self.key = settings.key
        self.table_name = settings.table_name
        self.owner_column = settings.owner_column

        self._client: Optional[Client] = None
        self._initialized = False
        self.logger = get_logger("supabase")

    async def initialize(self) -> bool:
        """Initialize the Supabase client."""
        try:
            self._client = create_client(self.url, self.key)
            self._initialized = True
            self.logger.info(f"✅ Supabase store initialized (table: {self.table_name})")
            return True
        except Exception as e:
            self.logger.error(f"Failed to initialize Supabase: {e}")
            return False

    def is_available(self) -> bool:
        return self._initialized and self._client is not None

    def _table(self):
        if not self.is_available():
            raise RemoteStoreError("Supabase store not initialized")
        return self._client.table(self.table_name)

    async def _execute(self, query):
        # The client is synchronous; run the request on a worker thread
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, query.execute)

    async def fetch(self, owner_id: str) -> Optional[Dict[str, Any]]:
        try:
            query = self._table().select("*").eq(self.owner_column, owner_id).limit(1)
            response = await self._execute(query)
        except RemoteStoreError:
            raise
        except Exception as e:
            raise RemoteStoreError(f"Error loading from Supabase: {e}") from e

        rows = response.data or []
        return rows[0] if rows else None

    async def upsert(self, owner_id: str, record: Dict[str, Any]) -> None:
        payload = dict(record)
        payload[self.owner_column] = owner_id
        payload["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            await self._execute(self._table().upsert(payload, on_conflict=self.owner_column))
        except RemoteStoreError:
            raise
        except Exception as e:
            raise RemoteStoreError(f"Error saving to Supabase: {e}") from e

    async def delete(self, owner_id: str) -> None:
        try:
            await self._execute(self._table().delete().eq(self.owner_column, owner_id))
        except RemoteStoreError:
            raise
        except Exception as e:
            raise RemoteStoreError(f"Error deleting from Supabase: {e}") from e
