"""Persistence medium and whole-collection storage engine."""

from .engine import StorageEngine
from .kv_store import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
    RedisKeyValueStore,
    get_kv_store,
)

__all__ = [
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "RedisKeyValueStore",
    "StorageEngine",
    "get_kv_store",
]
