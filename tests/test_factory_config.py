"""
Tests for provider construction and the configuration module.
"""

import pytest

from barberpro import config as config_module
from barberpro.factory import ProviderFactory
from barberpro.providers.local_store import JsonFileStore, MemoryKeyValueStore
from barberpro.providers.notification import NullNotificationProvider
from barberpro.providers.remote_store import InMemoryRemoteStore


class TestProviderFactory:

    def test_creates_registered_providers(self, tmp_path):
        assert isinstance(ProviderFactory.create_remote_store("memory", {}), InMemoryRemoteStore)
        assert isinstance(ProviderFactory.create_local_store("memory", {}), MemoryKeyValueStore)
        store = ProviderFactory.create_local_store("json_file", {"path": str(tmp_path / "s.json")})
        assert isinstance(store, JsonFileStore)

        notifier = ProviderFactory.create_notification_provider("null", {"grant_permission": True})
        assert isinstance(notifier, NullNotificationProvider)

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unsupported audio provider: trumpet"):
            ProviderFactory.create_audio_provider("trumpet", {})

    def test_list_available_providers(self):
        available = ProviderFactory.list_available_providers()
        assert available["notification"] == ["desktop", "null"]
        assert available["audio"] == ["system_tones", "null"]
        assert available["remote_store"] == ["supabase", "memory"]
        assert available["local_store"] == ["json_file", "memory"]

    def test_validate_provider_config(self):
        assert ProviderFactory.validate_provider_config("remote_store", "memory", {}) is True
        with pytest.raises(ValueError, match="Invalid provider type"):
            ProviderFactory.validate_provider_config("speaker", "null", {})
        with pytest.raises(ValueError):
            ProviderFactory.validate_provider_config("remote_store", "supabase", {})


class TestConfigModule:

    def test_framework_config_shape(self):
        cfg = config_module.get_framework_config()
        for section in ("notification", "audio", "remote_store", "local_store"):
            assert "provider" in cfg[section]
            assert isinstance(cfg[section]["config"], dict)
        assert cfg["reminders"]["lookahead_min_minutes"] == 4
        assert cfg["reminders"]["lookahead_max_minutes"] == 6
        assert cfg["backup"]["last_sync_key"] == "barber-last-cloud-sync"

    def test_sections_are_copies(self):
        cfg = config_module.get_framework_config()
        cfg["reminders"]["enabled"] = False
        assert config_module.REMINDER_CONFIG["enabled"] is True

    def test_testing_config_is_offline(self):
        cfg = config_module.get_testing_config()
        assert cfg["owner_id"] is None
        assert cfg["remote_store"]["provider"] == "memory"
        assert cfg["local_store"]["provider"] == "memory"
        assert cfg["audio"]["provider"] == "null"

    def test_set_providers(self, monkeypatch):
        monkeypatch.setattr(config_module, "AUDIO_PROVIDER", config_module.AUDIO_PROVIDER)
        monkeypatch.setattr(config_module, "LOCAL_STORE_PROVIDER", config_module.LOCAL_STORE_PROVIDER)

        config_module.set_providers(audio="null", local_store="memory")

        cfg = config_module.get_framework_config()
        assert cfg["audio"]["provider"] == "null"
        assert cfg["local_store"]["provider"] == "memory"

    def test_validate_environment_missing_credentials(self, monkeypatch):
        monkeypatch.setattr(config_module, "REMOTE_STORE_PROVIDER", "supabase")
        monkeypatch.setitem(config_module.SUPABASE_CONFIG, "url", None)
        monkeypatch.setitem(config_module.SUPABASE_CONFIG, "key", None)

        results = config_module.validate_environment()

        assert results["valid"] is False
        assert "Missing required: SUPABASE_URL" in results["errors"]
        assert "Missing required: SUPABASE_KEY" in results["errors"]

    def test_validate_environment_memory_backup(self, monkeypatch, tmp_path):
        monkeypatch.setattr(config_module, "REMOTE_STORE_PROVIDER", "memory")
        monkeypatch.setattr(config_module, "OWNER_ID", None)
        monkeypatch.setitem(config_module.LOCAL_STORE_CONFIG, "path", str(tmp_path / "state.json"))

        results = config_module.validate_environment()

        assert results["valid"] is True
        assert any("SUPABASE_URL" in w for w in results["warnings"])
        assert any("BARBERPRO_OWNER_ID" in w for w in results["warnings"])
