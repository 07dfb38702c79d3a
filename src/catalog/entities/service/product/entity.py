"""Entity: Product."""

import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.catalog.core.errors import ValidationError
from src.catalog.entities.core._base import Entity, generate_id

IMAGE_SLOT_COUNT = 6
SIZE_LABELS = ("S", "M", "L", "XL", "XXL")


class ProductType(str, Enum):
    APPAREL = "apparel"
    NON_APPAREL = "non-apparel"


def is_data_uri(value: Any) -> bool:
    return isinstance(value, str) and value.startswith("data:")


def empty_images() -> list[str | None]:
    return [None] * IMAGE_SLOT_COUNT


class Sizes(BaseModel):
    """Stock quantity per size label."""

    S: int = Field(default=0, ge=0)
    M: int = Field(default=0, ge=0)
    L: int = Field(default=0, ge=0)
    XL: int = Field(default=0, ge=0)
    XXL: int = Field(default=0, ge=0)

    def inventory_line(self) -> str:
        """Render as ``S:0 M:2 L:0 XL:0 XXL:0``."""
        return " ".join(f"{label}:{getattr(self, label)}" for label in SIZE_LABELS)


class Product(Entity):
    """Product entity, the only record persisted in the catalog collection.

    ``images`` holds one entry per slot: ``None`` for an empty slot or a
    data URI. The model accepts lists of any length so older records still
    load; ``ImageSlotManager`` pads them to ``IMAGE_SLOT_COUNT``.
    """

    name: str = Field(default="", description="Display name")
    description: str = Field(default="", description="Display description")
    price: float = Field(default=0, ge=0, allow_inf_nan=False, description="Unit price")
    type: ProductType = Field(default=ProductType.NON_APPAREL)
    sizes: Sizes = Field(default_factory=Sizes)
    images: list[str | None] = Field(default_factory=empty_images)

    @field_validator("images")
    @classmethod
    def _images_are_data_uris(cls, images: list[str | None]) -> list[str | None]:
        for index, value in enumerate(images):
            if value is not None and not is_data_uri(value):
                raise ValueError(f"image slot {index} is not a data URI")
        return images

    @property
    def is_apparel(self) -> bool:
        return self.type == ProductType.APPAREL

    @property
    def thumbnail(self) -> str | None:
        """First filled image slot, if any."""
        return next((src for src in self.images if src), None)

    @property
    def display_price(self) -> str:
        return f"${self.price:.2f}"


class ProductCandidate(BaseModel):
    """Editable product fields as a form supplies them.

    Values arrive as raw strings or numbers and are only interpreted by
    ``normalize_for_save``.
    """

    id: str | None = None
    name: str | None = ""
    description: str | None = ""
    price: Any = 0
    type: str | None = ProductType.NON_APPAREL.value
    sizes: dict[str, Any] = Field(default_factory=dict)


def create_empty() -> Product:
    """Build a fresh product with a new id and six empty image slots."""
    return Product(
        id=generate_id(),
        name="",
        description="",
        price=0,
        type=ProductType.NON_APPAREL,
        sizes=Sizes(),
        images=empty_images(),
    )


def parse_price(value: Any) -> float:
    """Parse a price, falling back to 0 for anything that is not a non-negative number."""
    try:
        price = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(price) or price < 0:
        return 0.0
    return price


def parse_quantity(value: Any) -> int:
    """Parse a stock quantity, falling back to 0."""
    try:
        return max(int(value), 0)
    except (TypeError, ValueError, OverflowError):
        pass
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(number):
        return 0
    return max(math.floor(number), 0)


def parse_type(value: Any) -> ProductType:
    if value == ProductType.APPAREL or value == ProductType.APPAREL.value:
        return ProductType.APPAREL
    return ProductType.NON_APPAREL


def normalize_for_save(candidate: ProductCandidate) -> Product:
    """Derive a storage-ready product from raw candidate fields.

    Non-apparel products always get zero stock for every size. Images are
    left as six empty slots; callers updating an existing record copy its
    images over before persisting.
    """
    product_type = parse_type(candidate.type)
    if product_type == ProductType.APPAREL:
        sizes = Sizes(
            **{label: parse_quantity(candidate.sizes.get(label, 0)) for label in SIZE_LABELS}
        )
    else:
        sizes = Sizes()

    return Product(
        id=candidate.id or generate_id(),
        name=(candidate.name or "").strip(),
        description=(candidate.description or "").strip(),
        price=parse_price(candidate.price),
        type=product_type,
        sizes=sizes,
        images=empty_images(),
    )


def validate_for_save(product: Product) -> None:
    """Check the fields the editor requires before a product is saved.

    Raises:
        ValidationError: If name or description is blank
    """
    errors = {}
    if not product.name.strip():
        errors["name"] = "Name is required"
    if not product.description.strip():
        errors["description"] = "Description is required"
    if errors:
        raise ValidationError(errors)
