"""Fixed-slot image management for a single product."""

from __future__ import annotations

from enum import Enum

from loguru import logger

from src.catalog.core.errors import ImageSlotError, NotFoundError
from src.catalog.core.storage.engine import StorageEngine
from src.catalog.entities.service.product import IMAGE_SLOT_COUNT, Product
from src.catalog.entities.service.product.entity import is_data_uri


class SlotState(str, Enum):
    EMPTY = "empty"
    FILLED = "filled"


def pad_images(images: list[str | None]) -> list[str | None]:
    """Pad ``images`` in place with empty slots up to ``IMAGE_SLOT_COUNT``.

    Lists that are already longer are left alone.
    """
    missing = IMAGE_SLOT_COUNT - len(images)
    if missing > 0:
        images.extend([None] * missing)
    return images


class ImageSlotManager:
    """Keeps a product's image slots consistent with the stored collection.

    Every set or clear is immediately followed by ``StorageEngine.update``
    of the whole product. The wrapped product is only changed once that
    write has succeeded.
    """

    def __init__(self, storage: StorageEngine[Product], product: Product):
        self._storage = storage
        self._product = product
        pad_images(self._product.images)

    @classmethod
    async def load(cls, storage: StorageEngine[Product], product_id: str) -> ImageSlotManager:
        """Open the manager on the stored product with ``product_id``.

        Raises:
            NotFoundError: If the product is not in the collection
        """
        product = await storage.get(product_id)
        if product is None:
            raise NotFoundError(product_id)
        return cls(storage, product)

    @property
    def product(self) -> Product:
        return self._product

    @property
    def slots(self) -> list[str | None]:
        return list(self._product.images)

    def state(self, index: int) -> SlotState:
        self._check_index(index)
        return SlotState.FILLED if self._product.images[index] else SlotState.EMPTY

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._product.images):
            raise ImageSlotError(
                f"Slot index {index} out of range 0..{len(self._product.images) - 1}"
            )

    async def _write_slot(self, index: int, value: str | None) -> Product:
        images = list(self._product.images)
        images[index] = value
        updated = self._product.model_copy(update={"images": images})
        await self._storage.update(updated)
        self._product.images = images
        return self._product

    async def set_slot(self, index: int, data_uri: str) -> Product:
        """Fill slot ``index`` with ``data_uri``, replacing any previous image."""
        self._check_index(index)
        if not is_data_uri(data_uri):
            raise ImageSlotError("Image value must be a data URI")
        product = await self._write_slot(index, data_uri)
        logger.info("image_slot.set id={} slot={}", product.id, index)
        return product

    async def clear_slot(self, index: int) -> Product:
        """Empty slot ``index``."""
        self._check_index(index)
        product = await self._write_slot(index, None)
        logger.info("image_slot.clear id={} slot={}", product.id, index)
        return product
