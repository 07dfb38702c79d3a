"""Read-only storefront listing."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, Field

from src.catalog.entities.service.product import Product, Sizes


class StorefrontItem(BaseModel):
    """A product as the storefront shows it."""

    id: str
    name: str
    description: str
    price: str = Field(description="Price formatted with two decimals")
    thumbnail: str | None = None
    thumbnails: list[str | None] = Field(default_factory=list)
    inventory: Sizes | None = Field(
        default=None, description="Stock per size, apparel only"
    )
    inventory_line: str | None = None


def to_storefront_item(product: Product) -> StorefrontItem:
    inventory = product.sizes if product.is_apparel else None
    return StorefrontItem(
        id=product.id,
        name=product.name,
        description=product.description,
        price=product.display_price,
        thumbnail=product.thumbnail,
        thumbnails=list(product.images),
        inventory=inventory,
        inventory_line=inventory.inventory_line() if inventory else None,
    )


def build_storefront(products: Iterable[Product]) -> list[StorefrontItem]:
    """Storefront items in collection order."""
    return [to_storefront_item(product) for product in products]
