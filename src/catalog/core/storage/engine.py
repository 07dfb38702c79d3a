"""Whole-collection CRUD over a key-value store.

The collection is always read and rewritten as a single JSON document. No
operation touches a single record in place, which keeps the engine usable
on top of any backend that can only fetch and replace one value per key.

Every mutating operation is a read followed by a write with an await in
between. There is no locking or versioning: callers must not interleave
operations on the same collection.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Generic, TypeVar

from loguru import logger
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from src.catalog.core.errors import (
    DuplicateIdError,
    NotFoundError,
    PersistenceCorruptionError,
)
from src.catalog.core.storage.kv_store import KeyValueStore
from src.catalog.entities.core._base import Entity

T = TypeVar("T", bound=Entity)


class StorageEngine(Generic[T]):
    """CRUD over one named collection of entities keyed by ``id``.

    Args:
        store: Persistence medium
        key: Key the collection is stored under
        model_class: Entity type of the collection items
    """

    def __init__(self, store: KeyValueStore, key: str, model_class: type[T]):
        self._store = store
        self._key = key
        self._model_class = model_class
        self._adapter = TypeAdapter(list[model_class])

    @property
    def key(self) -> str:
        return self._key

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def _corrupt(self, reason: str) -> PersistenceCorruptionError:
        logger.critical("storage.corrupt key={} reason={}", self._key, reason)
        return PersistenceCorruptionError(self._key, reason)

    async def _read_raw(self) -> str | None:
        try:
            return await self._store.get(self._key)
        except UnicodeDecodeError as e:
            raise self._corrupt(f"stored value is not valid UTF-8: {e}") from e

    def _parse(self, raw: str) -> list[T]:
        try:
            return self._adapter.validate_json(raw)
        except PydanticValidationError as e:
            raise self._corrupt(str(e)) from e

    def _serialize(self, items: Sequence[T]) -> str:
        return self._adapter.dump_json(list(items)).decode("utf-8")

    async def get_all(self) -> list[T]:
        """Return the full collection in persisted order.

        Returns:
            The stored items, or an empty list if nothing was persisted yet

        Raises:
            PersistenceCorruptionError: If the stored value cannot be parsed
        """
        raw = await self._read_raw()
        if raw is None:
            logger.debug("storage.get_all key={} empty", self._key)
            return []
        items = self._parse(raw)
        logger.debug("storage.get_all key={} count={}", self._key, len(items))
        return items

    async def save_all(self, items: Sequence[T]) -> Sequence[T]:
        """Persist ``items`` verbatim, replacing whatever was stored."""
        await self._store.set(self._key, self._serialize(items))
        logger.debug("storage.save_all key={} count={}", self._key, len(items))
        return items

    async def get(self, item_id: str) -> T | None:
        """Return the first item with ``item_id``, or None."""
        for item in await self.get_all():
            if item.id == item_id:
                return item
        return None

    async def add(self, item: T) -> T:
        """Append ``item`` to the collection.

        Raises:
            DuplicateIdError: If an item with the same id is already stored
        """
        items = await self.get_all()
        if any(existing.id == item.id for existing in items):
            raise DuplicateIdError(item.id)
        items.append(item)
        await self.save_all(items)
        logger.info("storage.add key={} id={}", self._key, item.id)
        return item

    async def update(self, item: T) -> T:
        """Replace the stored item that has the same id as ``item``.

        The replacement is wholesale; callers wanting a partial update merge
        before calling.

        Raises:
            NotFoundError: If no stored item has that id
        """
        items = await self.get_all()
        index = next(
            (i for i, existing in enumerate(items) if existing.id == item.id), None
        )
        if index is None:
            raise NotFoundError(item.id)
        items[index] = item
        await self.save_all(items)
        logger.info("storage.update key={} id={}", self._key, item.id)
        return item

    async def delete(self, item_id: str) -> list[T]:
        """Remove every item with ``item_id`` and return what remains."""
        items = await self.get_all()
        remaining = [item for item in items if item.id != item_id]
        await self.save_all(remaining)
        logger.info(
            "storage.delete key={} id={} removed={}",
            self._key,
            item_id,
            len(items) - len(remaining),
        )
        return remaining
