"""Entities module with entity-centric structure.

Each entity has its own package holding the domain model and the rules
that build and normalize it.
"""

from .service.product import Product, ProductCandidate, ProductType, Sizes

__all__ = [
    "Product",
    "ProductCandidate",
    "ProductType",
    "Sizes",
]
