"""
Provider Module - Black Box Interface

Purpose: Store sessions for the manager
Interface: Provider, Session, ProviderRegistry, MemoryProvider, RedisProvider
Hidden: Storage layout, serialization, per-backend locking

Any backend (memory, filesystem, database, custom) can be plugged in by
implementing the Provider protocol and registering it by name.
"""

from .interfaces import MISSING, Provider, Session
from .memory import MemoryProvider, MemorySession
from .redis import RedisProvider, RedisSession
from .registry import ProviderRegistry

__all__ = [
    "MISSING",
    "Provider",
    "Session",
    "ProviderRegistry",
    "MemoryProvider",
    "MemorySession",
    "RedisProvider",
    "RedisSession",
]
