"""
Tests for the Supabase remote store provider (client mocked).
"""

import pytest
from unittest.mock import MagicMock, patch

from barberpro.interfaces.remote_store import RemoteStoreError
from barberpro.providers.remote_store.supabase_store import SupabaseUserDataStore


SUPABASE = 'barberpro.providers.remote_store.supabase_store.create_client'


@pytest.fixture
def supabase_config():
    return {"url": "https://example.supabase.co/", "key": "service-key"}


@pytest.fixture
def mock_client():
    return MagicMock()


@pytest.fixture
def store(supabase_config, mock_client):
    """Store whose initialize() builds the mock client."""
    with patch(SUPABASE, return_value=mock_client):
        yield SupabaseUserDataStore(supabase_config)


class TestConfiguration:

    def test_requires_url_and_key(self):
        with pytest.raises(ValueError, match="URL and key are required"):
            SupabaseUserDataStore({"url": "https://example.supabase.co"})

    def test_rejects_non_http_url(self):
        with pytest.raises(ValueError):
            SupabaseUserDataStore({"url": "example.supabase.co", "key": "k"})

    def test_strips_trailing_slash(self, supabase_config):
        store = SupabaseUserDataStore(supabase_config)
        assert store.url == "https://example.supabase.co"
        assert store.table_name == "user_data"
        assert not store.is_available()

    @pytest.mark.asyncio
    async def test_initialize_failure_reports_false(self, supabase_config):
        with patch(SUPABASE, side_effect=Exception("bad key")):
            store = SupabaseUserDataStore(supabase_config)
            assert await store.initialize() is False
        assert not store.is_available()

    @pytest.mark.asyncio
    async def test_calls_before_initialize_raise(self, supabase_config):
        store = SupabaseUserDataStore(supabase_config)
        with pytest.raises(RemoteStoreError, match="not initialized"):
            await store.fetch("owner-1")


class TestOperations:

    @pytest.mark.asyncio
    async def test_fetch_returns_first_row(self, store, mock_client):
        await store.initialize()
        query = mock_client.table.return_value.select.return_value.eq.return_value.limit.return_value
        query.execute.return_value = MagicMock(data=[{"user_id": "owner-1", "services": []}])

        record = await store.fetch("owner-1")

        assert record == {"user_id": "owner-1", "services": []}
        mock_client.table.assert_called_with("user_data")
        mock_client.table.return_value.select.return_value.eq.assert_called_with("user_id", "owner-1")

    @pytest.mark.asyncio
    async def test_fetch_missing_record(self, store, mock_client):
        await store.initialize()
        query = mock_client.table.return_value.select.return_value.eq.return_value.limit.return_value
        query.execute.return_value = MagicMock(data=[])
        assert await store.fetch("owner-1") is None

    @pytest.mark.asyncio
    async def test_upsert_keys_by_owner(self, store, mock_client):
        await store.initialize()
        await store.upsert("owner-1", {"services": [], "user_id": "someone-else"})

        payload = mock_client.table.return_value.upsert.call_args.args[0]
        kwargs = mock_client.table.return_value.upsert.call_args.kwargs
        assert payload["user_id"] == "owner-1"
        assert payload["services"] == []
        assert "updated_at" in payload
        assert kwargs == {"on_conflict": "user_id"}

    @pytest.mark.asyncio
    async def test_delete(self, store, mock_client):
        await store.initialize()
        await store.delete("owner-1")
        mock_client.table.return_value.delete.return_value.eq.assert_called_with("user_id", "owner-1")

    @pytest.mark.asyncio
    async def test_client_errors_are_wrapped(self, store, mock_client):
        await store.initialize()
        mock_client.table.return_value.upsert.return_value.execute.side_effect = Exception("timeout")
        with pytest.raises(RemoteStoreError, match="Error saving to Supabase"):
            await store.upsert("owner-1", {})

    @pytest.mark.asyncio
    async def test_requests_run_off_the_event_loop(self, store, mock_client):
        import threading
        await store.initialize()
        threads = []

        def execute():
            threads.append(threading.get_ident())
            return MagicMock(data=[])

        query = mock_client.table.return_value.select.return_value.eq.return_value.limit.return_value
        query.execute.side_effect = execute
        mock_client.table.return_value.upsert.return_value.execute.side_effect = execute

        await store.fetch("owner-1")
        await store.upsert("owner-1", {})

        assert len(threads) == 2
        assert threading.get_ident() not in threads
