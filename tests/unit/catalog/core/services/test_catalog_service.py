"""Tests for the catalog editor service."""

import pytest

from src.catalog.core.errors import NotFoundError, ValidationError
from src.catalog.core.services.image_slots import ImageSlotManager
from src.catalog.entities.service.product import ProductCandidate, ProductType, Sizes


class TestCatalogService:
    @pytest.mark.asyncio
    async def test_new_product_is_stored_empty(self, catalog_service):
        product = await catalog_service.new_product()

        stored = await catalog_service.list_products()
        assert stored == [product]
        assert product.name == ""
        assert product.images == [None] * 6

    @pytest.mark.asyncio
    async def test_get_product(self, catalog_service):
        product = await catalog_service.new_product()
        assert await catalog_service.get_product(product.id) == product

    @pytest.mark.asyncio
    async def test_get_missing_product(self, catalog_service):
        with pytest.raises(NotFoundError):
            await catalog_service.get_product("ghost")

    @pytest.mark.asyncio
    async def test_save_creates_when_id_unknown(self, catalog_service):
        saved = await catalog_service.save_product(
            ProductCandidate(id="p1", name="Mug", description="Ceramic", price="8.5")
        )

        assert saved.id == "p1"
        assert saved.price == 8.5
        assert await catalog_service.list_products() == [saved]

    @pytest.mark.asyncio
    async def test_save_updates_and_keeps_images(self, catalog_service, image_data_uri):
        product = await catalog_service.new_product()
        manager = await catalog_service.image_manager(product.id)
        await manager.set_slot(3, image_data_uri)

        saved = await catalog_service.save_product(
            ProductCandidate(
                id=product.id,
                name="Shirt",
                description="Blue",
                price="19.99",
                type="apparel",
                sizes={"M": "2"},
            )
        )

        assert saved.images[3] == image_data_uri
        assert saved.type == ProductType.APPAREL
        assert saved.sizes == Sizes(M=2)
        assert await catalog_service.list_products() == [saved]

    @pytest.mark.asyncio
    async def test_save_non_apparel_zeroes_sizes(self, catalog_service):
        saved = await catalog_service.save_product(
            ProductCandidate(
                id="p1", name="Poster", description="A3", type="non-apparel", sizes={"S": 3, "M": 1}
            )
        )
        assert saved.sizes == Sizes()

    @pytest.mark.asyncio
    async def test_save_rejects_blank_name(self, catalog_service):
        product = await catalog_service.new_product()

        with pytest.raises(ValidationError) as exc_info:
            await catalog_service.save_product(
                ProductCandidate(id=product.id, name="   ", description="Blue")
            )

        assert "name" in exc_info.value.errors
        assert await catalog_service.list_products() == [product]

    @pytest.mark.asyncio
    async def test_delete_product(self, catalog_service):
        first = await catalog_service.new_product()
        second = await catalog_service.new_product()

        remaining = await catalog_service.delete_product(first.id)

        assert remaining == [second]

    @pytest.mark.asyncio
    async def test_image_manager(self, catalog_service):
        product = await catalog_service.new_product()

        manager = await catalog_service.image_manager(product.id)

        assert isinstance(manager, ImageSlotManager)
        assert manager.product == product

    @pytest.mark.asyncio
    async def test_image_manager_missing_product(self, catalog_service):
        with pytest.raises(NotFoundError):
            await catalog_service.image_manager("ghost")
