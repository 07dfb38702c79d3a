from fastapi import Depends, Request

from src.catalog.api.http.app_data import ApplicationDependencies
from src.catalog.core.services import CatalogService
from src.catalog.core.storage import StorageEngine
from src.catalog.entities.service.product import Product


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_product_storage(
    deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> StorageEngine[Product]:
    return deps.product_storage


def get_catalog_service(
    storage: StorageEngine[Product] = Depends(get_product_storage),
) -> CatalogService:
    return CatalogService(storage)
