"""
Services Layer for the brokerage core.

Exports rating, eligibility, plan resolution, claim lifecycle, status
presentation, quote issuance and the orchestrating claims service.
"""

from claimdesk.services.premium_service import (
    DEFAULT_FACTORS,
    RatingFactors,
    compute_premium,
    round_money,
)
from claimdesk.services.claim_validation import (
    EligibilityCode,
    EligibilityIssue,
    EligibilityResult,
    check_claim,
    validate_claim,
)
from claimdesk.services.plan_resolver import (
    build_coverage_info,
    determine_plan,
    get_coverage_limit,
)
from claimdesk.services.claim_state_machine import (
    ClaimAction,
    ClaimStateMachine,
    Transition,
    TransitionResult,
    get_claim_state_machine,
    is_approved_status,
    is_decided_status,
    is_terminal_status,
)
from claimdesk.services.status_presenter import (
    STATUS_TEMPLATES,
    build_amount_breakdown,
    derive_payment_state,
    describe_status,
)
from claimdesk.services.quote_service import QuoteService, add_months
from claimdesk.services.claims_service import ClaimsService

__all__ = [
    # Premium rating
    "DEFAULT_FACTORS",
    "RatingFactors",
    "compute_premium",
    "round_money",
    # Claim eligibility
    "EligibilityCode",
    "EligibilityIssue",
    "EligibilityResult",
    "check_claim",
    "validate_claim",
    # Plan resolution
    "build_coverage_info",
    "determine_plan",
    "get_coverage_limit",
    # Claim lifecycle
    "ClaimAction",
    "ClaimStateMachine",
    "Transition",
    "TransitionResult",
    "get_claim_state_machine",
    "is_approved_status",
    "is_decided_status",
    "is_terminal_status",
    # Status presentation
    "STATUS_TEMPLATES",
    "build_amount_breakdown",
    "derive_payment_state",
    "describe_status",
    # Quotes & policies
    "QuoteService",
    "add_months",
    # Orchestration
    "ClaimsService",
]
