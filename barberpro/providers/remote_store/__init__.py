"""
Remote backup store providers.
"""

from .supabase_store import SupabaseUserDataStore
from .memory_store import InMemoryRemoteStore

__all__ = ['SupabaseUserDataStore', 'InMemoryRemoteStore']
