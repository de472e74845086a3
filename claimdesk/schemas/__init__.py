"""
Pydantic Schemas for the Brokerage Claims Core.
"""

from claimdesk.schemas.audit import AuditEvent
from claimdesk.schemas.claim import (
    AmountBreakdown,
    Attachment,
    Claim,
    ClaimDecision,
    ClaimStatusView,
    ClaimSubmission,
    ClaimSubmissionResult,
    CoverageInfo,
)
from claimdesk.schemas.policy import Policy
from claimdesk.schemas.product import Product
from claimdesk.schemas.quote import Quote, QuoteRequest

__all__ = [
    "AmountBreakdown",
    "Attachment",
    "AuditEvent",
    "Claim",
    "ClaimDecision",
    "ClaimStatusView",
    "ClaimSubmission",
    "ClaimSubmissionResult",
    "CoverageInfo",
    "Policy",
    "Product",
    "Quote",
    "QuoteRequest",
]
