"""
Pydantic Schemas for Quotes.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from claimdesk.core.enums import QuoteStatus


class QuoteRequest(BaseModel):
    """Applicant request for a priced quote."""

    product_id: str = Field(..., min_length=1)
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Applicant facts: age, smoker, vehicleValue, tripDuration, ...",
    )


class Quote(BaseModel):
    """A priced, not-yet-issued request for a policy.

    The premium is computed once at creation and never recomputed.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    product_id: str
    requester_id: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    premium: Decimal = Field(..., gt=0)
    status: QuoteStatus = Field(default=QuoteStatus.PENDING)
    version: int = Field(default=1, ge=1, description="Quote revision number")
    policy_id: Optional[str] = Field(None, description="Policy issued from this quote")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
