"""Read-only storefront router."""

from fastapi import APIRouter, Depends

from src.catalog.api.http.deps import get_catalog_service
from src.catalog.core.services import CatalogService, StorefrontItem, build_storefront

router = APIRouter(prefix="/store", tags=["storefront"])


@router.get("", response_model=list[StorefrontItem])
async def storefront(
    service: CatalogService = Depends(get_catalog_service),
) -> list[StorefrontItem]:
    """Products as the storefront lists them."""
    return build_storefront(await service.list_products())
