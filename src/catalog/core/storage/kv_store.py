"""Key-value store interface and implementations.

The storage engine only needs ``get(key) -> str | None`` and
``set(key, str)`` from its persistence medium. Implementations are provided
for an in-process dict, a directory of files, and Redis.
"""

from __future__ import annotations

import asyncio
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from loguru import logger

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(ABC):
    """Abstract interface for string key-value backends."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Retrieve the value stored under ``key``.

        Returns:
            The stored string, or None if the key is absent
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key``. Removing an absent key is not an error."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the backend is healthy and available."""
        pass

    async def close(self) -> None:
        """Release backend resources. Most backends hold none."""
        return None


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store; contents live as long as the instance."""

    def __init__(self):
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def is_available(self) -> bool:
        """In-memory storage is always available."""
        return True


class FileKeyValueStore(KeyValueStore):
    """Stores each key as ``<directory>/<key>.json``.

    Writes go to a temporary file in the same directory which then replaces
    the target, so a reader never sees a half-written value.
    """

    def __init__(self, directory: str | Path):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}.json"

    def _read(self, key: str) -> str | None:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def _write(self, key: str, value: str) -> None:
        path = self._path_for(key)
        self._directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _remove(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)

    async def get(self, key: str) -> str | None:
        return await asyncio.to_thread(self._read, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, key, value)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._remove, key)

    def is_available(self) -> bool:
        if self._directory.exists():
            return os.access(self._directory, os.W_OK)
        return True


class RedisKeyValueStore(KeyValueStore):
    """Redis-based store using a ``redis.asyncio`` client."""

    def __init__(self, redis_client):
        self._redis = redis_client
        self._available = True

    async def get(self, key: str) -> str | None:
        try:
            data = await self._redis.get(key)
            self._available = True
        except Exception as e:
            self._available = False
            raise RuntimeError(f"Redis get failed: {e}") from e

        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return data

    async def set(self, key: str, value: str) -> None:
        try:
            await self._redis.set(key, value)
            self._available = True
        except Exception as e:
            self._available = False
            raise RuntimeError(f"Redis set failed: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(key)
            self._available = True
        except Exception as e:
            self._available = False
            raise RuntimeError(f"Redis delete failed: {e}") from e

    def is_available(self) -> bool:
        """Check if Redis connection is healthy."""
        return self._available

    async def close(self) -> None:
        await self._redis.aclose()

    async def ping(self) -> bool:
        """Test Redis connection health."""
        try:
            await self._redis.ping()
            self._available = True
            return True
        except Exception:
            self._available = False
            return False


# Global store instance
_store: KeyValueStore | None = None


async def _create_redis_store() -> KeyValueStore:
    import redis.asyncio as redis

    from src.catalog.runtime.context import get_config

    config = get_config()
    if not config.redis.enabled or not config.redis.url:
        raise RuntimeError("Redis not configured")

    redis_client = redis.from_url(
        config.redis.connection_string,
        encoding="utf-8",
        decode_responses=config.redis.decode_responses,
        socket_connect_timeout=config.redis.socket_timeout,
        socket_timeout=config.redis.socket_timeout,
    )

    redis_store = RedisKeyValueStore(redis_client)
    if not await redis_store.ping():
        await redis_store.close()
        raise RuntimeError("Redis ping failed")

    logger.info(
        "Key-value store: Redis connected at {}",
        config.redis.sanitized_connection_string,
    )
    return redis_store


async def create_kv_store() -> KeyValueStore:
    """Build the store selected by the ``storage`` configuration section.

    A Redis backend that cannot be reached falls back to the file backend,
    except in production where the failure is raised.
    """
    from src.catalog.runtime.context import get_config

    config = get_config()
    backend = config.storage.backend

    if backend == "memory":
        logger.info("Key-value store: in-memory")
        return InMemoryKeyValueStore()

    if backend == "redis":
        try:
            return await _create_redis_store()
        except Exception as e:
            if config.app.environment == "production":
                raise
            logger.warning(
                "Redis unavailable ({}), using file store in {}",
                e,
                config.storage.directory,
            )

    logger.info("Key-value store: files in {}", config.storage.directory)
    return FileKeyValueStore(config.storage.directory)


async def get_kv_store() -> KeyValueStore:
    """Get the process-wide key-value store, creating it on first use."""
    global _store

    if _store is None:
        _store = await create_kv_store()

    return _store


async def close_kv_store() -> None:
    """Close the process-wide store and forget it."""
    global _store

    if _store is not None:
        await _store.close()
        _store = None


def _reset_store() -> None:
    """Reset store instance (for testing)."""
    global _store
    _store = None
