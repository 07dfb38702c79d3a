"""Error taxonomy for the catalog core.

Every operation either completes or raises one of these to its immediate
caller. Nothing here is retried.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for catalog errors."""


class NotFoundError(CatalogError):
    """No product with the requested id exists in the collection."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class DuplicateIdError(CatalogError):
    """A product with the same id is already in the collection."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product id already exists: {product_id}")


class ValidationError(CatalogError):
    """A product failed the save-time checks performed by the caller.

    Attributes:
        errors: Mapping of field name to a human readable message
    """

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        detail = "; ".join(f"{field}: {message}" for field, message in errors.items())
        super().__init__(f"Invalid product: {detail}")


class PersistenceCorruptionError(CatalogError):
    """The persisted collection could not be parsed.

    This is fatal for the collection: it is never repaired automatically and
    the stored value has to be fixed or cleared out of band.
    """

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Persisted collection '{key}' is corrupt: {reason}")


class ImageSlotError(CatalogError):
    """An image slot operation was given a bad index or value."""


class ImageReadError(CatalogError):
    """Uploaded bytes could not be read or are not an image."""
