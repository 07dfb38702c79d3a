"""Core services for the catalog editor."""

from .catalog_service import CatalogService, create_product_storage
from .data_uri import encode_data_uri, read_upload
from .image_slots import ImageSlotManager, SlotState
from .storefront import StorefrontItem, build_storefront

__all__ = [
    "CatalogService",
    "ImageSlotManager",
    "SlotState",
    "StorefrontItem",
    "build_storefront",
    "create_product_storage",
    "encode_data_uri",
    "read_upload",
]
