"""
Claim Lifecycle State Machine.

Provides:
- Valid status transitions
- Transition validation
- Submit / assess / decide / pay operations with their derived fields

State Diagram:
    (new) -> SUBMITTED
    SUBMITTED -> IN_REVIEW
    IN_REVIEW -> APPROVED | PARTIALLY_APPROVED | REJECTED
    APPROVED -> PAID
    PARTIALLY_APPROVED -> PAID

PAID and REJECTED are terminal. Every operation returns a new Claim and
leaves the input untouched; a failed precondition raises TransitionError
and nothing changes.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Callable, Iterable, Optional

from claimdesk.core.enums import ClaimStatus
from claimdesk.schemas.claim import Attachment, Claim, ClaimDecision, ClaimSubmission
from claimdesk.schemas.policy import Policy
from claimdesk.schemas.product import Product
from claimdesk.services.claim_validation import DEFAULT_LIMIT_MULTIPLIER, validate_claim
from claimdesk.services.premium_service import round_money
from claimdesk.utils.errors import ClaimValidationError, TransitionError

logger = logging.getLogger(__name__)


class ClaimAction(str, Enum):
    """Staff actions that move a claim forward."""

    ASSESS = "assess"
    DECIDE = "decide"
    PAY = "pay"


@dataclass(frozen=True)
class Transition:
    """Represents a valid state transition."""

    from_status: ClaimStatus
    to_status: ClaimStatus
    action: ClaimAction
    requires_reason: bool = False


@dataclass
class TransitionResult:
    """Result of a transition check."""

    success: bool
    from_status: ClaimStatus
    to_status: Optional[ClaimStatus] = None
    error: Optional[str] = None
    transition: Optional[Transition] = None


DECISION_STATUSES = frozenset(
    {ClaimStatus.APPROVED, ClaimStatus.PARTIALLY_APPROVED, ClaimStatus.REJECTED}
)
APPROVED_STATUSES = frozenset({ClaimStatus.APPROVED, ClaimStatus.PARTIALLY_APPROVED})
TERMINAL_STATUSES = frozenset({ClaimStatus.PAID, ClaimStatus.REJECTED})


# =============================================================================
# Valid Transitions Definition
# =============================================================================


VALID_TRANSITIONS: list[Transition] = [
    Transition(
        from_status=ClaimStatus.SUBMITTED,
        to_status=ClaimStatus.IN_REVIEW,
        action=ClaimAction.ASSESS,
    ),
    Transition(
        from_status=ClaimStatus.IN_REVIEW,
        to_status=ClaimStatus.APPROVED,
        action=ClaimAction.DECIDE,
        requires_reason=True,
    ),
    Transition(
        from_status=ClaimStatus.IN_REVIEW,
        to_status=ClaimStatus.PARTIALLY_APPROVED,
        action=ClaimAction.DECIDE,
        requires_reason=True,
    ),
    Transition(
        from_status=ClaimStatus.IN_REVIEW,
        to_status=ClaimStatus.REJECTED,
        action=ClaimAction.DECIDE,
        requires_reason=True,
    ),
    Transition(
        from_status=ClaimStatus.APPROVED,
        to_status=ClaimStatus.PAID,
        action=ClaimAction.PAY,
    ),
    Transition(
        from_status=ClaimStatus.PARTIALLY_APPROVED,
        to_status=ClaimStatus.PAID,
        action=ClaimAction.PAY,
    ),
]


# =============================================================================
# State Machine
# =============================================================================


class ClaimStateMachine:
    """
    State machine for the claim lifecycle.

    Holds the transition map and applies transitions to Claim records.
    """

    def __init__(
        self,
        limit_multiplier: Decimal = DEFAULT_LIMIT_MULTIPLIER,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize state machine.

        Args:
            limit_multiplier: Hard cap multiple used by submission checks
            clock: Source of "now" for timestamps (UTC)
        """
        self.limit_multiplier = limit_multiplier
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._transitions: dict[tuple[ClaimStatus, ClaimStatus], Transition] = {}
        self._from_status_map: dict[ClaimStatus, list[Transition]] = {}

        self._build_transition_maps()

    def _build_transition_maps(self) -> None:
        """Build lookup maps for transitions."""
        for transition in VALID_TRANSITIONS:
            self._transitions[(transition.from_status, transition.to_status)] = transition
            self._from_status_map.setdefault(transition.from_status, []).append(transition)

    # =========================================================================
    # Introspection
    # =========================================================================

    def get_valid_transitions(self, status: ClaimStatus) -> list[Transition]:
        """Get all valid transitions from a given status."""
        return self._from_status_map.get(status, [])

    def get_next_statuses(self, status: ClaimStatus) -> list[ClaimStatus]:
        """Get all possible next statuses from current status."""
        return [t.to_status for t in self.get_valid_transitions(status)]

    def can_transition(self, from_status: ClaimStatus, to_status: ClaimStatus) -> bool:
        """Check if transition from one status to another is valid."""
        return (from_status, to_status) in self._transitions

    def available_actions(self, claim: Claim) -> list[ClaimAction]:
        """Actions staff can take on the claim right now."""
        actions: list[ClaimAction] = []
        for transition in self.get_valid_transitions(claim.status):
            if transition.action not in actions:
                actions.append(transition.action)
        return actions

    def validate_transition(
        self,
        claim: Claim,
        action: ClaimAction,
        target_status: ClaimStatus,
        reason: Optional[str] = None,
    ) -> TransitionResult:
        """
        Validate a transition attempt.

        The claim's current state is checked before anything else.
        """
        current = claim.status
        candidates = [t for t in self.get_valid_transitions(current) if t.action == action]
        if not candidates:
            return TransitionResult(
                success=False,
                from_status=current,
                error=_wrong_state_message(action, current),
            )

        transition = self._transitions.get((current, target_status))
        if transition is None or transition.action != action:
            allowed = ", ".join(t.to_status.value for t in candidates)
            return TransitionResult(
                success=False,
                from_status=current,
                error=f"Invalid target status {target_status.value}; expected one of: {allowed}",
            )

        if transition.requires_reason and not (reason and reason.strip()):
            return TransitionResult(
                success=False,
                from_status=current,
                error="Decision reason is required",
            )

        return TransitionResult(
            success=True,
            from_status=current,
            to_status=transition.to_status,
            transition=transition,
        )

    def _require(
        self,
        claim: Claim,
        action: ClaimAction,
        target_status: ClaimStatus,
        reason: Optional[str] = None,
    ) -> Transition:
        result = self.validate_transition(claim, action, target_status, reason)
        if not result.success:
            logger.warning(
                f"Transition failed for claim {claim.id}: {result.error}"
            )
            raise TransitionError(
                result.error,
                claim_id=claim.id,
                current_status=claim.status.value,
                action=action.value,
            )
        return result.transition

    # =========================================================================
    # Operations
    # =========================================================================

    def submit(
        self,
        policy: Policy,
        product: Product,
        payload: ClaimSubmission,
        claimant_id: str,
        attachments: Iterable[Attachment] = (),
    ) -> Claim:
        """
        Create a SUBMITTED claim after eligibility checks.

        Raises:
            ClaimValidationError: With every failed check; nothing is created
        """
        errors = validate_claim(policy, product, payload, self.limit_multiplier)
        if errors:
            logger.warning(
                f"Claim submission rejected for policy {policy.policy_number}: {errors}"
            )
            raise ClaimValidationError("Claim validation failed", errors=errors)

        claim = Claim(
            policy_id=policy.id,
            claimant_id=claimant_id,
            claim_type=payload.claim_type,
            amount=payload.amount,
            incident_date=payload.incident_date,
            description=payload.description,
            attachments=list(attachments),
            status=ClaimStatus.SUBMITTED,
            created_at=self._clock(),
        )
        logger.info(f"Claim {claim.id} submitted under policy {policy.policy_number}")
        return claim

    def assess(self, claim: Claim, assessed_by: Optional[str] = None) -> Claim:
        """
        Start assessment.

        Transitions: SUBMITTED -> IN_REVIEW
        """
        transition = self._require(claim, ClaimAction.ASSESS, ClaimStatus.IN_REVIEW)
        updates = {"status": transition.to_status, "assessed_at": self._clock()}
        if assessed_by and not claim.assessed_by:
            updates["assessed_by"] = assessed_by
        return self._apply(claim, transition, updates)

    def decide(
        self,
        claim: Claim,
        decision: ClaimDecision,
        assessed_by: Optional[str] = None,
    ) -> Claim:
        """
        Record the assessor's decision.

        Transitions: IN_REVIEW -> APPROVED | PARTIALLY_APPROVED | REJECTED

        For approvals the eligible amount defaults to the claimed amount,
        the deductible to 0, and the approved amount to
        ``max(0, eligible - deductible)``. Rejections carry no amounts.
        """
        transition = self._require(
            claim, ClaimAction.DECIDE, decision.status, decision.decision_reason
        )

        updates = {
            "status": transition.to_status,
            "decision_reason": decision.decision_reason.strip(),
            "assessed_at": claim.assessed_at or self._clock(),
            "assessed_by": claim.assessed_by or assessed_by,
        }

        if transition.to_status in APPROVED_STATUSES:
            eligible = (
                decision.eligible_amount
                if decision.eligible_amount is not None
                else claim.amount
            )
            deductible = decision.deductible if decision.deductible is not None else Decimal("0")
            approved = decision.approved_amount
            if approved is None:
                approved = max(Decimal("0"), eligible - deductible)
            updates.update(
                eligible_amount=round_money(eligible),
                deductible=round_money(deductible),
                approved_amount=round_money(approved),
            )
        else:
            updates.update(eligible_amount=None, deductible=None, approved_amount=None)

        return self._apply(claim, transition, updates)

    def pay(self, claim: Claim) -> Claim:
        """
        Mark an approved claim as paid.

        Transitions: APPROVED | PARTIALLY_APPROVED -> PAID
        """
        if claim.status == ClaimStatus.PAID or claim.paid_at is not None:
            logger.warning(f"Transition failed for claim {claim.id}: already paid")
            raise TransitionError(
                "Claim already paid",
                claim_id=claim.id,
                current_status=claim.status.value,
                action=ClaimAction.PAY.value,
            )
        transition = self._require(claim, ClaimAction.PAY, ClaimStatus.PAID)
        return self._apply(
            claim, transition, {"status": transition.to_status, "paid_at": self._clock()}
        )

    def _apply(self, claim: Claim, transition: Transition, updates: dict) -> Claim:
        updated = claim.model_copy(update=updates)
        logger.info(
            f"Claim {claim.id} transitioned: "
            f"{transition.from_status.value} -> {transition.to_status.value} "
            f"(action: {transition.action.value})"
        )
        return updated


def _wrong_state_message(action: ClaimAction, current: ClaimStatus) -> str:
    if action == ClaimAction.ASSESS:
        return f"Cannot start assessment of a claim in {current.value} status; claim must be SUBMITTED"
    if action == ClaimAction.DECIDE:
        return f"Cannot decide a claim in {current.value} status; claim must be IN_REVIEW"
    return (
        f"Cannot pay a claim in {current.value} status; "
        "claim must be APPROVED or PARTIALLY_APPROVED"
    )


# =============================================================================
# Status Helpers
# =============================================================================


def is_terminal_status(status: ClaimStatus) -> bool:
    """Check if status is terminal (no further transitions)."""
    return status in TERMINAL_STATUSES


def is_approved_status(status: ClaimStatus) -> bool:
    """Check if claim has been approved, fully or partially, and awaits payout."""
    return status in APPROVED_STATUSES


def is_decided_status(status: ClaimStatus) -> bool:
    """Check if an assessor decision has been recorded."""
    return status in DECISION_STATUSES or status == ClaimStatus.PAID


# =============================================================================
# Singleton Instance
# =============================================================================


_state_machine: Optional[ClaimStateMachine] = None


def get_claim_state_machine() -> ClaimStateMachine:
    """Get singleton state machine instance configured from settings."""
    global _state_machine
    if _state_machine is None:
        from claimdesk.core.config import get_settings

        _state_machine = ClaimStateMachine(
            limit_multiplier=get_settings().CLAIM_LIMIT_MULTIPLIER
        )
    return _state_machine
