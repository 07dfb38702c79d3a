"""Tests for key-value store implementations."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.catalog.core.storage.kv_store import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    RedisKeyValueStore,
    _reset_store,
    close_kv_store,
    create_kv_store,
    get_kv_store,
)
from src.catalog.runtime.config.config_data import AppConfig, ConfigData, RedisConfig, StorageConfig
from src.catalog.runtime.context import with_context


class TestInMemoryKeyValueStore:
    """Test in-memory store implementation."""

    def setup_method(self):
        self.store = InMemoryKeyValueStore()

    @pytest.mark.asyncio
    async def test_get_missing_key(self):
        assert await self.store.get("missing") is None

    @pytest.mark.asyncio
    async def test_set_and_get(self):
        await self.store.set("k", "[]")
        assert await self.store.get("k") == "[]"

    @pytest.mark.asyncio
    async def test_set_overwrites(self):
        await self.store.set("k", "one")
        await self.store.set("k", "two")
        assert await self.store.get("k") == "two"

    @pytest.mark.asyncio
    async def test_delete(self):
        await self.store.set("k", "v")
        await self.store.delete("k")
        await self.store.delete("never-set")
        assert await self.store.get("k") is None

    def test_is_available(self):
        assert self.store.is_available() is True


class TestFileKeyValueStore:
    """Test the file-per-key store."""

    @pytest.mark.asyncio
    async def test_get_missing_key(self, tmp_path):
        store = FileKeyValueStore(tmp_path / "data")
        assert await store.get("storeProducts_v1") is None

    @pytest.mark.asyncio
    async def test_set_creates_directory_and_file(self, tmp_path):
        store = FileKeyValueStore(tmp_path / "data")

        await store.set("storeProducts_v1", '[{"id": "a"}]')

        path = tmp_path / "data" / "storeProducts_v1.json"
        assert path.read_text(encoding="utf-8") == '[{"id": "a"}]'
        assert await store.get("storeProducts_v1") == '[{"id": "a"}]'

    @pytest.mark.asyncio
    async def test_values_survive_new_instance(self, tmp_path):
        await FileKeyValueStore(tmp_path).set("k", "persisted")
        assert await FileKeyValueStore(tmp_path).get("k") == "persisted"

    @pytest.mark.asyncio
    async def test_no_temporary_files_left(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        await store.set("k", "a")
        await store.set("k", "b")

        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]

    @pytest.mark.asyncio
    async def test_delete(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        await store.set("k", "v")
        await store.delete("k")
        await store.delete("k")
        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_rejects_path_like_keys(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        with pytest.raises(ValueError, match="Invalid storage key"):
            await store.set("../escape", "v")

    def test_is_available(self, tmp_path):
        assert FileKeyValueStore(tmp_path).is_available() is True


class TestRedisKeyValueStore:
    """Test Redis store with a mocked client."""

    def setup_method(self):
        self.mock_redis = AsyncMock()
        self.store = RedisKeyValueStore(self.mock_redis)

    @pytest.mark.asyncio
    async def test_set(self):
        await self.store.set("k", "[]")
        self.mock_redis.set.assert_called_once_with("k", "[]")

    @pytest.mark.asyncio
    async def test_get(self):
        self.mock_redis.get.return_value = "[]"
        assert await self.store.get("k") == "[]"
        self.mock_redis.get.assert_called_once_with("k")

    @pytest.mark.asyncio
    async def test_get_bytes(self):
        self.mock_redis.get.return_value = b"[1]"
        assert await self.store.get("k") == "[1]"

    @pytest.mark.asyncio
    async def test_get_missing(self):
        self.mock_redis.get.return_value = None
        assert await self.store.get("k") is None

    @pytest.mark.asyncio
    async def test_delete(self):
        await self.store.delete("k")
        self.mock_redis.delete.assert_called_once_with("k")

    @pytest.mark.asyncio
    async def test_failure_marks_unavailable(self):
        self.mock_redis.set.side_effect = ConnectionError("down")

        with pytest.raises(RuntimeError, match="Redis set failed"):
            await self.store.set("k", "v")

        assert self.store.is_available() is False

    @pytest.mark.asyncio
    async def test_ping(self):
        assert await self.store.ping() is True
        self.mock_redis.ping.side_effect = ConnectionError("down")
        assert await self.store.ping() is False
        assert self.store.is_available() is False

    @pytest.mark.asyncio
    async def test_close(self):
        await self.store.close()
        self.mock_redis.aclose.assert_awaited_once()


class TestStoreSelection:
    """Test building the store from configuration."""

    def teardown_method(self):
        _reset_store()

    @pytest.mark.asyncio
    async def test_memory_backend(self):
        with with_context(ConfigData(storage=StorageConfig(backend="memory"))):
            store = await create_kv_store()
        assert isinstance(store, InMemoryKeyValueStore)

    @pytest.mark.asyncio
    async def test_file_backend(self, tmp_path):
        config = ConfigData(storage=StorageConfig(backend="file", directory=str(tmp_path)))
        with with_context(config):
            store = await create_kv_store()
        assert isinstance(store, FileKeyValueStore)
        assert store.directory == tmp_path

    @pytest.mark.asyncio
    async def test_redis_backend(self):
        mock_client = AsyncMock()
        redis_module = MagicMock()
        redis_module.from_url.return_value = mock_client
        config = ConfigData(
            storage=StorageConfig(backend="redis"),
            redis=RedisConfig(url="redis://localhost:6379/0"),
        )

        with patch("redis.asyncio.from_url", redis_module.from_url), with_context(config):
            store = await create_kv_store()

        assert isinstance(store, RedisKeyValueStore)
        mock_client.ping.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unreachable_redis_falls_back_to_files(self, tmp_path):
        mock_client = AsyncMock()
        mock_client.ping.side_effect = ConnectionError("refused")
        config = ConfigData(
            storage=StorageConfig(backend="redis", directory=str(tmp_path)),
            redis=RedisConfig(url="redis://localhost:6379/0"),
            app=AppConfig(environment="development"),
        )

        with patch("redis.asyncio.from_url", return_value=mock_client), with_context(config):
            store = await create_kv_store()

        assert isinstance(store, FileKeyValueStore)
        mock_client.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unreachable_redis_raises_in_production(self):
        mock_client = AsyncMock()
        mock_client.ping.side_effect = ConnectionError("refused")
        config = ConfigData(
            storage=StorageConfig(backend="redis"),
            redis=RedisConfig(url="redis://localhost:6379/0"),
            app=AppConfig(environment="production"),
        )

        with patch("redis.asyncio.from_url", return_value=mock_client), with_context(config):
            with pytest.raises(RuntimeError, match="Redis ping failed"):
                await create_kv_store()

    @pytest.mark.asyncio
    async def test_get_kv_store_is_cached(self):
        with with_context(ConfigData(storage=StorageConfig(backend="memory"))):
            first = await get_kv_store()
            second = await get_kv_store()
            assert first is second

            await close_kv_store()
            assert await get_kv_store() is not first
