"""
Core Enumerations for the Brokerage Claims Core.

Values are the upper-case wire strings stored by the record store and
shown to staff (e.g. "PARTIALLY_APPROVED").
"""

from enum import Enum


# =============================================================================
# Product & Policy Enums
# =============================================================================


class ProductType(str, Enum):
    """Insurance product categories."""

    HEALTH = "HEALTH"
    LIFE = "LIFE"
    MOTOR = "MOTOR"
    TRAVEL = "TRAVEL"
    FIRE = "FIRE"
    PROPERTY = "PROPERTY"
    HOME = "HOME"
    BUSINESS = "BUSINESS"
    LIABILITY = "LIABILITY"


class PolicyStatus(str, Enum):
    """Policy lifecycle status."""

    ACTIVE = "ACTIVE"
    LAPSED = "LAPSED"
    CANCELLED = "CANCELLED"
    RENEWED = "RENEWED"


class QuoteStatus(str, Enum):
    """Quote decision status.

    PENDING -> APPROVED | REJECTED
    """

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class PlanTierName(str, Enum):
    """Marketing package tiers, lowest to highest."""

    BASIC = "BASIC"
    STANDARD = "STANDARD"
    PREMIUM = "PREMIUM"
    ULTRA_PREMIUM = "ULTRA_PREMIUM"


# =============================================================================
# Claim Processing Enums
# =============================================================================


class ClaimStatus(str, Enum):
    """Claim lifecycle status.

    State Machine Transitions:
    SUBMITTED -> IN_REVIEW
    IN_REVIEW -> APPROVED | PARTIALLY_APPROVED | REJECTED
    APPROVED -> PAID
    PARTIALLY_APPROVED -> PAID
    """

    SUBMITTED = "SUBMITTED"
    IN_REVIEW = "IN_REVIEW"
    APPROVED = "APPROVED"
    PARTIALLY_APPROVED = "PARTIALLY_APPROVED"
    REJECTED = "REJECTED"
    PAID = "PAID"


class PaymentState(str, Enum):
    """Derived payout state shown alongside a claim."""

    NOT_APPLICABLE = "NOT_APPLICABLE"  # Not approved (yet), or rejected
    PENDING = "PENDING"  # Approved, awaiting payout
    PAID = "PAID"


# =============================================================================
# Audit Enums
# =============================================================================


class AuditAction(str, Enum):
    """Actions reported to audit callbacks after a successful operation."""

    CLAIM_SUBMITTED = "CLAIM_SUBMITTED"
    CLAIM_IN_REVIEW = "CLAIM_IN_REVIEW"
    CLAIM_APPROVED = "CLAIM_APPROVED"
    CLAIM_PARTIALLY_APPROVED = "CLAIM_PARTIALLY_APPROVED"
    CLAIM_REJECTED = "CLAIM_REJECTED"
    CLAIM_PAID = "CLAIM_PAID"
    QUOTE_CREATED = "QUOTE_CREATED"
    QUOTE_APPROVED = "QUOTE_APPROVED"
    QUOTE_REJECTED = "QUOTE_REJECTED"
    POLICY_ISSUED = "POLICY_ISSUED"
    POLICY_UPDATED = "POLICY_UPDATED"
    PREMIUM_PAID = "PREMIUM_PAID"

    @classmethod
    def for_claim_status(cls, status: "ClaimStatus") -> "AuditAction":
        """Audit action recorded when a claim enters ``status``."""
        return cls(f"CLAIM_{status.value}")
