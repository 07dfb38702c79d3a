"""Product API router with CRUD operations."""

from fastapi import APIRouter, Depends, status

from src.catalog.api.http.deps import get_catalog_service
from src.catalog.core.services import CatalogService
from src.catalog.entities.service.product import Product, ProductCandidate

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=list[Product])
async def list_products(
    service: CatalogService = Depends(get_catalog_service),
) -> list[Product]:
    """List all products in collection order."""
    return await service.list_products()


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
async def create_product(
    service: CatalogService = Depends(get_catalog_service),
) -> Product:
    """Create an empty product for the editor to fill in."""
    return await service.new_product()


@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> Product:
    return await service.get_product(product_id)


@router.put("/{product_id}", response_model=Product)
async def save_product(
    product_id: str,
    candidate: ProductCandidate,
    service: CatalogService = Depends(get_catalog_service),
) -> Product:
    """Save edited fields, keeping the product's stored images."""
    candidate.id = product_id
    return await service.save_product(candidate)


@router.delete("/{product_id}", response_model=list[Product])
async def delete_product(
    product_id: str,
    service: CatalogService = Depends(get_catalog_service),
) -> list[Product]:
    """Delete a product and return the remaining collection."""
    return await service.delete_product(product_id)
