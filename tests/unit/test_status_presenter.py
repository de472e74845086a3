"""
Unit Tests for Claim Status Presentation
Tests per-status copy, payout state and the amount breakdown
"""

from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from claimdesk.core.enums import ClaimStatus, PaymentState
from claimdesk.schemas.claim import ClaimDecision
from claimdesk.services.claim_state_machine import ClaimStateMachine
from claimdesk.services.status_presenter import (
    build_amount_breakdown,
    derive_payment_state,
    describe_status,
)


@pytest.mark.unit
class TestDescribeStatus:
    """Test customer-facing status views"""

    def test_submitted(self, submitted_claim):
        view = describe_status(submitted_claim)
        assert view.status == "SUBMITTED"
        assert view.label == "Submitted"
        assert view.payment_status == PaymentState.NOT_APPLICABLE
        assert view.next_step_hint

    def test_in_review(self, in_review_claim):
        view = describe_status(in_review_claim)
        assert view.label == "In Review"
        assert "being assessed" in view.message

    def test_approved_embeds_amount(self, in_review_claim, clock):
        """Test that a fresh approval shows the approved amount"""
        claim = ClaimStateMachine(clock=clock).decide(
            in_review_claim,
            ClaimDecision(status=ClaimStatus.APPROVED, decision_reason="Covered", approved_amount=Decimal("400")),
        )
        view = describe_status(claim)
        assert "400" in view.message
        assert view.message.endswith("Reason: Covered")
        assert view.payment_status == PaymentState.PENDING

    def test_partially_approved(self, in_review_claim):
        claim = in_review_claim.model_copy(
            update={
                "status": ClaimStatus.PARTIALLY_APPROVED,
                "approved_amount": Decimal("300.00"),
                "decision_reason": "Excess applies",
            }
        )
        view = describe_status(claim)
        assert view.label == "Partially Approved"
        assert "300.00 of 450.00" in view.message
        assert view.amount_breakdown.rejected_amount == Decimal("150.00")

    def test_rejected(self, in_review_claim):
        claim = in_review_claim.model_copy(
            update={"status": ClaimStatus.REJECTED, "decision_reason": "Policy exclusion"}
        )
        view = describe_status(claim)
        assert view.message == "Your claim has been rejected. Reason: Policy exclusion"
        assert view.amount_breakdown.rejected_amount == Decimal("450.00")
        assert view.payment_status == PaymentState.NOT_APPLICABLE

    def test_paid(self, in_review_claim):
        claim = in_review_claim.model_copy(
            update={
                "status": ClaimStatus.PAID,
                "approved_amount": Decimal("400.00"),
                "paid_at": datetime(2024, 7, 1, 12, 0, tzinfo=timezone.utc),
            }
        )
        view = describe_status(claim)
        assert view.message == "Payment of 400.00 was issued on 2024-07-01."
        assert view.payment_status == PaymentState.PAID

    def test_unknown_status_uses_generic_copy(self):
        claim = SimpleNamespace(status="ON_HOLD", amount=Decimal("10"))
        view = describe_status(claim)
        assert view.label == "On Hold"
        assert view.message == "Your claim status is On Hold."
        assert view.payment_status == PaymentState.NOT_APPLICABLE

    def test_claim_not_mutated(self, in_review_claim):
        before = in_review_claim.model_dump()
        describe_status(in_review_claim)
        assert in_review_claim.model_dump() == before


@pytest.mark.unit
class TestAmountBreakdown:
    """Test money figures"""

    def test_only_claimed_before_decision(self, submitted_claim):
        breakdown = build_amount_breakdown(submitted_claim)
        assert breakdown.claimed_amount == Decimal("450.00")
        assert breakdown.eligible_amount is None
        assert breakdown.approved_amount is None
        assert breakdown.rejected_amount is None

    def test_approved_has_no_rejected_amount(self, in_review_claim):
        claim = in_review_claim.model_copy(
            update={
                "status": ClaimStatus.APPROVED,
                "eligible_amount": Decimal("450.00"),
                "deductible": Decimal("50.00"),
                "approved_amount": Decimal("400.00"),
            }
        )
        breakdown = build_amount_breakdown(claim)
        assert breakdown.deductible == Decimal("50.00")
        assert breakdown.approved_amount == Decimal("400.00")
        assert breakdown.rejected_amount is None


@pytest.mark.unit
class TestPaymentState:
    """Test payout state derivation"""

    @pytest.mark.parametrize(
        "status,expected",
        [
            (ClaimStatus.SUBMITTED, PaymentState.NOT_APPLICABLE),
            (ClaimStatus.IN_REVIEW, PaymentState.NOT_APPLICABLE),
            (ClaimStatus.APPROVED, PaymentState.PENDING),
            (ClaimStatus.PARTIALLY_APPROVED, PaymentState.PENDING),
            (ClaimStatus.REJECTED, PaymentState.NOT_APPLICABLE),
            (ClaimStatus.PAID, PaymentState.PAID),
        ],
    )
    def test_states(self, submitted_claim, status, expected):
        claim = submitted_claim.model_copy(update={"status": status})
        assert derive_payment_state(claim) == expected
