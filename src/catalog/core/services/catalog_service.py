"""Editor operations on top of the product storage engine."""

from __future__ import annotations

from loguru import logger

from src.catalog.core.errors import NotFoundError
from src.catalog.core.services.image_slots import ImageSlotManager
from src.catalog.core.storage.engine import StorageEngine
from src.catalog.core.storage.kv_store import KeyValueStore
from src.catalog.entities.service.product import (
    Product,
    ProductCandidate,
    create_empty,
    normalize_for_save,
    validate_for_save,
)
from src.catalog.entities.service.product.entity import empty_images


def create_product_storage(store: KeyValueStore, key: str) -> StorageEngine[Product]:
    """Build the storage engine for the product collection under ``key``."""
    return StorageEngine(store, key, Product)


class CatalogService:
    """What the editor does around the storage engine.

    Saving merges the images already stored for the product into the edited
    fields and checks required fields before anything is written.
    """

    def __init__(self, storage: StorageEngine[Product]):
        self._storage = storage

    @property
    def storage(self) -> StorageEngine[Product]:
        return self._storage

    async def list_products(self) -> list[Product]:
        return await self._storage.get_all()

    async def get_product(self, product_id: str) -> Product:
        product = await self._storage.get(product_id)
        if product is None:
            raise NotFoundError(product_id)
        return product

    async def new_product(self) -> Product:
        """Create and store an empty product."""
        product = await self._storage.add(create_empty())
        logger.info("catalog.new id={}", product.id)
        return product

    async def save_product(self, candidate: ProductCandidate) -> Product:
        """Normalize, validate and store edited product fields.

        Updates the stored product when the id exists, otherwise adds it.

        Raises:
            ValidationError: If name or description is blank
        """
        product = normalize_for_save(candidate)
        existing = await self._storage.get(product.id)
        product.images = list(existing.images) if existing else empty_images()

        validate_for_save(product)

        if existing is not None:
            saved = await self._storage.update(product)
        else:
            saved = await self._storage.add(product)
        logger.info("catalog.save id={} created={}", saved.id, existing is None)
        return saved

    async def delete_product(self, product_id: str) -> list[Product]:
        return await self._storage.delete(product_id)

    async def image_manager(self, product_id: str) -> ImageSlotManager:
        return await ImageSlotManager.load(self._storage, product_id)
