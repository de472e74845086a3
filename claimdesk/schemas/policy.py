"""
Pydantic Schemas for Policies.
"""

from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from claimdesk.core.enums import PolicyStatus


class Policy(BaseModel):
    """An issued, priced coverage contract under a product.

    Only ``status`` and ``premium_paid`` change after issuance.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    policy_number: str = Field(..., min_length=1, max_length=80, description="Externally visible number")
    product_id: str = Field(..., description="Pinned product")
    policyholder_id: str = Field(..., description="Owning customer")
    quote_id: Optional[str] = Field(None, description="Approved quote this policy was issued from")
    premium: Decimal = Field(..., gt=0, description="Premium fixed at issuance")
    start_date: date = Field(..., description="Coverage start (inclusive)")
    end_date: date = Field(..., description="Coverage end (inclusive)")
    status: PolicyStatus = Field(default=PolicyStatus.ACTIVE)
    premium_paid: bool = Field(default=False)

    @model_validator(mode="after")
    def end_after_start(self) -> "Policy":
        """Ensure end date is after start date."""
        if self.end_date <= self.start_date:
            raise ValueError("Policy end date must be after start date")
        return self

    def covers(self, day: date) -> bool:
        """Check whether ``day`` falls inside the coverage period."""
        return self.start_date <= day <= self.end_date
