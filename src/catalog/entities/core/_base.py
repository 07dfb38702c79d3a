import uuid

from pydantic import BaseModel
from pydantic import Field as PydanticField


def generate_id() -> str:
    """Return a fresh opaque identifier."""
    return str(uuid.uuid4())


class Entity(BaseModel):
    """Base entity class with auto-generated UUID identifier."""

    id: str = PydanticField(
        default_factory=generate_id,
        min_length=1,
        description="Unique identifier for the entity",
    )
