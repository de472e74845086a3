"""
Claim Eligibility Validator.

Checks a claim submission against its policy and product. Every check
runs; the caller gets the complete list of problems in one pass and
rejects the submission (persists nothing) when the list is non-empty.

Checks:
- Incident date inside the policy period (inclusive)
- Claim type equals the product type
- Description free of product exclusion phrases (case-insensitive)
- Amount within the hard cap of premium x 5
- Policy is ACTIVE
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional

from claimdesk.core.enums import PolicyStatus
from claimdesk.schemas.claim import ClaimSubmission
from claimdesk.schemas.policy import Policy
from claimdesk.schemas.product import Product
from claimdesk.services.premium_service import round_money

logger = logging.getLogger(__name__)

DEFAULT_LIMIT_MULTIPLIER = Decimal("5")


class EligibilityCode(str, Enum):
    """Reason a claim is not admissible."""

    INCIDENT_OUTSIDE_PERIOD = "incident_outside_period"
    CLAIM_TYPE_MISMATCH = "claim_type_mismatch"
    EXCLUSION_TRIGGERED = "exclusion_triggered"
    AMOUNT_OVER_LIMIT = "amount_over_limit"
    POLICY_NOT_ACTIVE = "policy_not_active"


@dataclass
class EligibilityIssue:
    """Single admissibility problem."""

    code: EligibilityCode
    message: str
    field: Optional[str] = None
    details: Optional[dict] = None


@dataclass
class EligibilityResult:
    """Complete admissibility result."""

    issues: list[EligibilityIssue] = field(default_factory=list)

    @property
    def is_admissible(self) -> bool:
        return not self.issues

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self.issues]

    def add(self, code: EligibilityCode, message: str, field: Optional[str] = None, **details) -> None:
        self.issues.append(
            EligibilityIssue(code=code, message=message, field=field, details=details or None)
        )


def format_amount(amount: Decimal) -> str:
    """Render money without a trailing ``.00`` on whole amounts (500, 512.50)."""
    rounded = round_money(amount)
    if rounded == rounded.to_integral_value():
        return str(int(rounded))
    return str(rounded)


def claim_limit(policy: Policy, multiplier: Decimal = DEFAULT_LIMIT_MULTIPLIER) -> Decimal:
    """Hard cap on a single claim under ``policy``."""
    return policy.premium * multiplier


def find_triggered_exclusions(product: Product, description: Optional[str]) -> list[str]:
    """Exclusion phrases appearing in the description, case-insensitively."""
    text = (description or "").lower()
    return [phrase for phrase in product.exclusions if phrase.lower() in text]


def check_claim(
    policy: Policy,
    product: Product,
    payload: ClaimSubmission,
    limit_multiplier: Decimal = DEFAULT_LIMIT_MULTIPLIER,
) -> EligibilityResult:
    """
    Run every admissibility check and collect the problems.

    Args:
        policy: Policy the claim is filed under
        product: Product pinned by the policy
        payload: Claim submission
        limit_multiplier: Hard cap multiple of the premium

    Returns:
        EligibilityResult with one issue per failed check
    """
    result = EligibilityResult()

    if not policy.covers(payload.incident_date):
        result.add(
            EligibilityCode.INCIDENT_OUTSIDE_PERIOD,
            "Incident date must be within policy period",
            field="incident_date",
            incident_date=payload.incident_date.isoformat(),
            start_date=policy.start_date.isoformat(),
            end_date=policy.end_date.isoformat(),
        )

    if payload.claim_type != product.type:
        result.add(
            EligibilityCode.CLAIM_TYPE_MISMATCH,
            "Claim type not covered by policy product",
            field="claim_type",
            claim_type=payload.claim_type.value,
            product_type=product.type.value,
        )

    triggered = find_triggered_exclusions(product, payload.description)
    if triggered:
        result.add(
            EligibilityCode.EXCLUSION_TRIGGERED,
            "Claim triggers product exclusion",
            field="description",
            exclusions=triggered,
        )

    max_amount = claim_limit(policy, limit_multiplier)
    if payload.amount > max_amount:
        result.add(
            EligibilityCode.AMOUNT_OVER_LIMIT,
            f"Claim amount exceeds limit of {format_amount(max_amount)}",
            field="amount",
            amount=str(payload.amount),
            limit=str(max_amount),
        )

    if policy.status != PolicyStatus.ACTIVE:
        result.add(
            EligibilityCode.POLICY_NOT_ACTIVE,
            "Policy is not active",
            field="policy",
            status=policy.status.value,
        )

    if result.issues:
        logger.debug(
            f"Claim against policy {policy.policy_number} inadmissible: "
            f"{[issue.code.value for issue in result.issues]}"
        )
    return result


def validate_claim(
    policy: Policy,
    product: Product,
    payload: ClaimSubmission,
    limit_multiplier: Decimal = DEFAULT_LIMIT_MULTIPLIER,
) -> list[str]:
    """
    Validate a claim submission.

    Returns:
        Human-readable error messages; empty when the claim is admissible
    """
    return check_claim(policy, product, payload, limit_multiplier).messages
