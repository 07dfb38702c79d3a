"""Entity package: Product."""

from .entity import (
    IMAGE_SLOT_COUNT,
    SIZE_LABELS,
    Product,
    ProductCandidate,
    ProductType,
    Sizes,
    create_empty,
    normalize_for_save,
    validate_for_save,
)

__all__ = [
    "IMAGE_SLOT_COUNT",
    "SIZE_LABELS",
    "Product",
    "ProductCandidate",
    "ProductType",
    "Sizes",
    "create_empty",
    "normalize_for_save",
    "validate_for_save",
]
