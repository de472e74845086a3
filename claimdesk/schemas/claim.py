"""
Pydantic Schemas for Claims Management.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from claimdesk.core.enums import ClaimStatus, PaymentState, PlanTierName, ProductType


# =============================================================================
# Submission Schemas
# =============================================================================


class Attachment(BaseModel):
    """Uploaded file metadata; the file itself lives elsewhere."""

    filename: str = Field(..., min_length=1, max_length=255)
    mimetype: str = Field(default="application/octet-stream", max_length=100)
    size: Optional[int] = Field(None, ge=0, description="File size in bytes")


class ClaimSubmission(BaseModel):
    """Customer claim payload checked by the eligibility validator."""

    claim_type: ProductType = Field(..., description="Must equal the policy's product type")
    amount: Decimal = Field(..., gt=0, description="Claimed amount")
    incident_date: date = Field(..., description="Date the incident occurred")
    description: str = Field(..., min_length=1, max_length=5000)

    @field_validator("claim_type", mode="before")
    @classmethod
    def normalize_claim_type(cls, v):
        """Normalize claim type to upper case ("motor" -> "MOTOR")."""
        if isinstance(v, str):
            return v.strip().upper()
        return v


class ClaimDecision(BaseModel):
    """Assessor decision applied to a claim under review.

    Reason and target status are checked by the lifecycle, after the
    claim state check.
    """

    status: ClaimStatus
    decision_reason: Optional[str] = None
    eligible_amount: Optional[Decimal] = Field(None, ge=0)
    deductible: Optional[Decimal] = Field(None, ge=0)
    approved_amount: Optional[Decimal] = Field(None, ge=0)


# =============================================================================
# Claim Record
# =============================================================================


class Claim(BaseModel):
    """A request for payment under a policy.

    Decision fields stay ``None`` until the lifecycle sets them.
    ``version`` increments on every successful save.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    policy_id: str
    claimant_id: str
    claim_type: ProductType
    amount: Decimal = Field(..., gt=0)
    incident_date: date
    description: str
    attachments: list[Attachment] = Field(default_factory=list)

    status: ClaimStatus = Field(default=ClaimStatus.SUBMITTED)
    eligible_amount: Optional[Decimal] = None
    deductible: Optional[Decimal] = None
    approved_amount: Optional[Decimal] = None
    decision_reason: Optional[str] = None
    assessed_at: Optional[datetime] = None
    assessed_by: Optional[str] = None
    paid_at: Optional[datetime] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = Field(default=1, ge=1)


# =============================================================================
# Derived Views
# =============================================================================


class CoverageInfo(BaseModel):
    """Advisory plan/ceiling readout returned with a successful submission."""

    plan_name: Optional[PlanTierName] = None
    product_type: ProductType
    policy_premium: Decimal
    coverage_limit: Optional[Decimal] = Field(None, description="None means unlimited")
    claimed_amount: Decimal
    remaining_coverage: Optional[Decimal] = None
    unlimited: bool = False

    @property
    def within_limit(self) -> bool:
        """Whether the claimed amount fits under the plan ceiling."""
        return self.coverage_limit is None or self.claimed_amount <= self.coverage_limit


class AmountBreakdown(BaseModel):
    """Money figures shown to the customer."""

    claimed_amount: Decimal
    eligible_amount: Optional[Decimal] = None
    deductible: Optional[Decimal] = None
    approved_amount: Optional[Decimal] = None
    rejected_amount: Optional[Decimal] = None


class ClaimStatusView(BaseModel):
    """Customer-facing status descriptor."""

    status: str
    label: str
    message: str
    next_step_hint: str
    payment_status: PaymentState
    amount_breakdown: AmountBreakdown


class ClaimSubmissionResult(BaseModel):
    """Persisted claim plus advisory coverage readout."""

    claim: Claim
    coverage_info: Optional[CoverageInfo] = None
