"""Image slot endpoints."""

from fastapi import APIRouter, Depends, File, UploadFile

from src.catalog.api.http.deps import get_catalog_service
from src.catalog.core.services import CatalogService, read_upload
from src.catalog.entities.service.product import Product

router = APIRouter(prefix="/api/products/{product_id}/images", tags=["images"])


@router.put("/{slot}", response_model=Product)
async def set_image(
    product_id: str,
    slot: int,
    file: UploadFile = File(...),
    service: CatalogService = Depends(get_catalog_service),
) -> Product:
    """Upload an image into a slot, replacing any image already there."""
    manager = await service.image_manager(product_id)
    data_uri = await read_upload(file)
    return await manager.set_slot(slot, data_uri)


@router.delete("/{slot}", response_model=Product)
async def clear_image(
    product_id: str,
    slot: int,
    service: CatalogService = Depends(get_catalog_service),
) -> Product:
    manager = await service.image_manager(product_id)
    return await manager.clear_slot(slot)
