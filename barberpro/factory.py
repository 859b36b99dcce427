"""
Factory for creating provider instances based on configuration.
"""

from typing import Dict, Any

from .interfaces import (
    NotificationInterface,
    AudioAlertInterface,
    RemoteStoreInterface,
    KeyValueStoreInterface,
)
from .providers.notification import DesktopNotificationProvider, NullNotificationProvider
from .providers.audio import SystemToneProvider, NullAudioProvider
from .providers.remote_store import SupabaseUserDataStore, InMemoryRemoteStore
from .providers.local_store import JsonFileStore, MemoryKeyValueStore


class ProviderFactory:
    """Factory for creating provider instances."""

    # Provider registries
    NOTIFICATION_PROVIDERS = {
        'desktop': DesktopNotificationProvider,
        'null': NullNotificationProvider,
    }

    AUDIO_PROVIDERS = {
        'system_tones': SystemToneProvider,
        'null': NullAudioProvider,
    }

    REMOTE_STORE_PROVIDERS = {
        'supabase': SupabaseUserDataStore,
        'memory': InMemoryRemoteStore,
    }

    LOCAL_STORE_PROVIDERS = {
        'json_file': JsonFileStore,
        'memory': MemoryKeyValueStore,
    }

    @classmethod
    def _registries(cls) -> Dict[str, Dict[str, type]]:
        return {
            'notification': cls.NOTIFICATION_PROVIDERS,
            'audio': cls.AUDIO_PROVIDERS,
            'remote_store': cls.REMOTE_STORE_PROVIDERS,
            'local_store': cls.LOCAL_STORE_PROVIDERS,
        }

    @classmethod
    def _create(cls, provider_type: str, provider_name: str, config: Dict[str, Any]):
        registry = cls._registries()[provider_type]
        if provider_name not in registry:
            available = ', '.join(registry.keys())
            raise ValueError(f"Unsupported {provider_type} provider: {provider_name}. Available: {available}")
        return registry[provider_name](config)

    @classmethod
    def create_notification_provider(cls,
                                     provider_name: str,
                                     config: Dict[str, Any]) -> NotificationInterface:
        """
        Create a notification provider instance.

        Args:
            provider_name: Name of the provider to create
            config: Configuration for the provider

        Returns:
            NotificationInterface: Provider instance

        Raises:
            ValueError: If provider name is not supported
        """
        return cls._create('notification', provider_name, config)

    @classmethod
    def create_audio_provider(cls,
                              provider_name: str,
                              config: Dict[str, Any]) -> AudioAlertInterface:
        """Create an audio alert provider instance."""
        return cls._create('audio', provider_name, config)

    @classmethod
    def create_remote_store(cls,
                            provider_name: str,
                            config: Dict[str, Any]) -> RemoteStoreInterface:
        """
        Create a remote backup store.

        Raises:
            ValueError: If provider name is not supported or credentials are missing
            ImportError: If the provider's client library is not installed
        """
        return cls._create('remote_store', provider_name, config)

    @classmethod
    def create_local_store(cls,
                           provider_name: str,
                           config: Dict[str, Any]) -> KeyValueStoreInterface:
        """Create a local key-value store."""
        return cls._create('local_store', provider_name, config)

    @classmethod
    def list_available_providers(cls) -> Dict[str, list]:
        """
        Get list of all available providers by type.

        Returns:
            Dictionary mapping provider types to available provider names
        """
        return {name: list(registry.keys()) for name, registry in cls._registries().items()}

    @classmethod
    def validate_provider_config(cls, provider_type: str, provider_name: str, config: Dict[str, Any]) -> bool:
        """
        Validate a provider configuration by building the provider.

        Raises:
            ValueError: If provider type/name is invalid or the config is rejected
        """
        registries = cls._registries()
        if provider_type not in registries:
            available_types = ', '.join(registries.keys())
            raise ValueError(f"Invalid provider type: {provider_type}. Available: {available_types}")

        try:
            cls._create(provider_type, provider_name, config)
            return True
        except ValueError:
            raise
        except Exception as e:
            raise ValueError(f"Provider configuration validation failed: {e}")
