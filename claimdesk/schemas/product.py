"""
Pydantic Schemas for Insurance Products.
"""

from decimal import Decimal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from claimdesk.core.enums import ProductType


class Product(BaseModel):
    """An insurance offering with a base premium and exclusion phrases."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(..., min_length=1, max_length=200, description="Display name")
    type: ProductType = Field(..., description="Product category")
    base_premium: Decimal = Field(..., gt=0, decimal_places=2, description="Base annual premium")
    exclusions: list[str] = Field(
        default_factory=list,
        description="Phrases matched case-insensitively against claim descriptions",
    )

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        """Accept lower-case product types."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("exclusions")
    @classmethod
    def drop_blank_exclusions(cls, v: list[str]) -> list[str]:
        """Blank phrases would match every description."""
        return [phrase.strip() for phrase in v if phrase and phrase.strip()]
