"""
Unit Tests for the Claim Lifecycle State Machine
Tests transitions, preconditions and derived decision fields
"""

from datetime import date
from decimal import Decimal

import pytest

from claimdesk.core.enums import ClaimStatus, PolicyStatus
from claimdesk.schemas.claim import Attachment, ClaimDecision
from claimdesk.services.claim_state_machine import (
    ClaimAction,
    ClaimStateMachine,
    is_approved_status,
    is_decided_status,
    is_terminal_status,
)
from claimdesk.utils.errors import ClaimValidationError, TransitionError


@pytest.fixture
def state_machine(clock):
    return ClaimStateMachine(clock=clock)


@pytest.fixture
def approved_claim(state_machine, in_review_claim):
    return state_machine.decide(
        in_review_claim,
        ClaimDecision(status=ClaimStatus.APPROVED, decision_reason="Covered", approved_amount=Decimal("400")),
    )


@pytest.mark.unit
class TestTransitionMap:
    """Test transition introspection"""

    def test_submitted_to_in_review(self, state_machine):
        assert state_machine.can_transition(ClaimStatus.SUBMITTED, ClaimStatus.IN_REVIEW)

    def test_submitted_cannot_be_paid(self, state_machine):
        assert not state_machine.can_transition(ClaimStatus.SUBMITTED, ClaimStatus.PAID)

    def test_rejected_cannot_be_paid(self, state_machine):
        assert not state_machine.can_transition(ClaimStatus.REJECTED, ClaimStatus.PAID)

    def test_next_statuses_from_in_review(self, state_machine):
        assert set(state_machine.get_next_statuses(ClaimStatus.IN_REVIEW)) == {
            ClaimStatus.APPROVED,
            ClaimStatus.PARTIALLY_APPROVED,
            ClaimStatus.REJECTED,
        }

    def test_terminal_statuses_have_no_transitions(self, state_machine):
        assert state_machine.get_valid_transitions(ClaimStatus.PAID) == []
        assert state_machine.get_valid_transitions(ClaimStatus.REJECTED) == []

    def test_available_actions(self, state_machine, submitted_claim, in_review_claim):
        assert state_machine.available_actions(submitted_claim) == [ClaimAction.ASSESS]
        assert state_machine.available_actions(in_review_claim) == [ClaimAction.DECIDE]

    def test_status_helpers(self):
        assert is_terminal_status(ClaimStatus.PAID)
        assert is_terminal_status(ClaimStatus.REJECTED)
        assert not is_terminal_status(ClaimStatus.APPROVED)
        assert is_approved_status(ClaimStatus.PARTIALLY_APPROVED)
        assert not is_approved_status(ClaimStatus.PAID)
        assert is_decided_status(ClaimStatus.PAID)
        assert not is_decided_status(ClaimStatus.IN_REVIEW)


@pytest.mark.unit
class TestSubmit:
    """Test claim creation"""

    def test_submit_creates_submitted_claim(
        self, state_machine, active_policy, motor_product, valid_submission, fixed_now
    ):
        attachment = Attachment(filename="photo.jpg", mimetype="image/jpeg", size=2048)
        claim = state_machine.submit(
            active_policy, motor_product, valid_submission, "customer-1", [attachment]
        )
        assert claim.status == ClaimStatus.SUBMITTED
        assert claim.policy_id == active_policy.id
        assert claim.amount == Decimal("450.00")
        assert claim.attachments == [attachment]
        assert claim.created_at == fixed_now
        for field in ("eligible_amount", "deductible", "approved_amount", "decision_reason",
                      "assessed_at", "assessed_by", "paid_at"):
            assert getattr(claim, field) is None

    def test_submit_rejects_with_all_errors(
        self, state_machine, active_policy, motor_product, valid_submission
    ):
        policy = active_policy.model_copy(update={"status": PolicyStatus.CANCELLED})
        payload = valid_submission.model_copy(update={"incident_date": date(2030, 1, 1)})
        with pytest.raises(ClaimValidationError) as exc_info:
            state_machine.submit(policy, motor_product, payload, "customer-1")
        assert exc_info.value.errors == [
            "Incident date must be within policy period",
            "Policy is not active",
        ]


@pytest.mark.unit
class TestAssess:
    """Test SUBMITTED -> IN_REVIEW"""

    def test_assess_sets_timestamp(self, state_machine, submitted_claim, fixed_now):
        claim = state_machine.assess(submitted_claim, assessed_by="officer-7")
        assert claim.status == ClaimStatus.IN_REVIEW
        assert claim.assessed_at == fixed_now
        assert claim.assessed_by == "officer-7"

    def test_assess_leaves_input_untouched(self, state_machine, submitted_claim):
        state_machine.assess(submitted_claim)
        assert submitted_claim.status == ClaimStatus.SUBMITTED
        assert submitted_claim.assessed_at is None

    def test_assess_twice_fails(self, state_machine, in_review_claim):
        with pytest.raises(TransitionError) as exc_info:
            state_machine.assess(in_review_claim)
        assert "must be SUBMITTED" in str(exc_info.value)
        assert exc_info.value.current_status == "IN_REVIEW"
        assert exc_info.value.action == "assess"


@pytest.mark.unit
class TestDecide:
    """Test IN_REVIEW -> APPROVED | PARTIALLY_APPROVED | REJECTED"""

    def test_approve_with_explicit_amount(self, approved_claim):
        assert approved_claim.status == ClaimStatus.APPROVED
        assert approved_claim.approved_amount == Decimal("400.00")
        assert approved_claim.decision_reason == "Covered"

    def test_approved_amount_computed(self, state_machine, in_review_claim):
        decision = ClaimDecision(
            status=ClaimStatus.PARTIALLY_APPROVED,
            decision_reason="Partial damage covered",
            eligible_amount=Decimal("300"),
            deductible=Decimal("50"),
        )
        claim = state_machine.decide(in_review_claim, decision, assessed_by="officer-7")
        assert claim.status == ClaimStatus.PARTIALLY_APPROVED
        assert claim.eligible_amount == Decimal("300.00")
        assert claim.deductible == Decimal("50.00")
        assert claim.approved_amount == Decimal("250.00")

    def test_approved_amount_never_negative(self, state_machine, in_review_claim):
        decision = ClaimDecision(
            status=ClaimStatus.PARTIALLY_APPROVED,
            decision_reason="Below deductible",
            eligible_amount=Decimal("40"),
            deductible=Decimal("100"),
        )
        claim = state_machine.decide(in_review_claim, decision)
        assert claim.approved_amount == Decimal("0.00")

    def test_eligible_defaults_to_claimed(self, state_machine, in_review_claim):
        decision = ClaimDecision(status=ClaimStatus.APPROVED, decision_reason="Covered")
        claim = state_machine.decide(in_review_claim, decision)
        assert claim.eligible_amount == Decimal("450.00")
        assert claim.deductible == Decimal("0.00")
        assert claim.approved_amount == Decimal("450.00")

    def test_reject_clears_amounts(self, state_machine, in_review_claim):
        decision = ClaimDecision(
            status=ClaimStatus.REJECTED,
            decision_reason="Pre-existing damage",
            approved_amount=Decimal("100"),
        )
        claim = state_machine.decide(in_review_claim, decision)
        assert claim.status == ClaimStatus.REJECTED
        assert claim.approved_amount is None
        assert claim.eligible_amount is None

    def test_assessor_set_when_missing(self, state_machine, in_review_claim):
        decision = ClaimDecision(status=ClaimStatus.REJECTED, decision_reason="Fraud")
        claim = state_machine.decide(in_review_claim, decision, assessed_by="officer-9")
        assert claim.assessed_by == "officer-9"
        assert claim.assessed_at == in_review_claim.assessed_at

    def test_assessor_not_overwritten(self, state_machine, in_review_claim):
        claim = in_review_claim.model_copy(update={"assessed_by": "officer-1"})
        decision = ClaimDecision(status=ClaimStatus.REJECTED, decision_reason="Fraud")
        assert state_machine.decide(claim, decision, assessed_by="officer-9").assessed_by == "officer-1"

    @pytest.mark.parametrize("reason", [None, "", "   "])
    def test_blank_reason_fails(self, state_machine, in_review_claim, reason):
        decision = ClaimDecision(status=ClaimStatus.APPROVED, decision_reason=reason)
        with pytest.raises(TransitionError, match="Decision reason is required"):
            state_machine.decide(in_review_claim, decision)

    def test_invalid_target_fails(self, state_machine, in_review_claim):
        decision = ClaimDecision(status=ClaimStatus.PAID, decision_reason="Skip ahead")
        with pytest.raises(TransitionError, match="Invalid target status PAID"):
            state_machine.decide(in_review_claim, decision)

    @pytest.mark.parametrize(
        "status",
        [ClaimStatus.SUBMITTED, ClaimStatus.APPROVED, ClaimStatus.REJECTED, ClaimStatus.PAID],
    )
    def test_decide_requires_in_review(self, state_machine, submitted_claim, status):
        """Test that a valid decision still fails outside IN_REVIEW"""
        claim = submitted_claim.model_copy(update={"status": status})
        decision = ClaimDecision(status=ClaimStatus.APPROVED, decision_reason="Covered")
        with pytest.raises(TransitionError, match="claim must be IN_REVIEW"):
            state_machine.decide(claim, decision)

    def test_state_checked_before_reason(self, state_machine, submitted_claim):
        """Test that the state error wins over a blank reason"""
        decision = ClaimDecision(status=ClaimStatus.APPROVED, decision_reason="")
        with pytest.raises(TransitionError, match="claim must be IN_REVIEW"):
            state_machine.decide(submitted_claim, decision)

    def test_failed_decide_leaves_claim_unchanged(self, state_machine, in_review_claim):
        before = in_review_claim.model_dump()
        with pytest.raises(TransitionError):
            state_machine.decide(in_review_claim, ClaimDecision(status=ClaimStatus.APPROVED))
        assert in_review_claim.model_dump() == before


@pytest.mark.unit
class TestPay:
    """Test APPROVED | PARTIALLY_APPROVED -> PAID"""

    def test_pay_sets_paid_at(self, state_machine, approved_claim, fixed_now):
        paid = state_machine.pay(approved_claim)
        assert paid.status == ClaimStatus.PAID
        assert paid.paid_at == fixed_now

    def test_pay_twice_fails(self, state_machine, approved_claim):
        paid = state_machine.pay(approved_claim)
        with pytest.raises(TransitionError, match="already paid"):
            state_machine.pay(paid)

    def test_pay_rejected_fails(self, state_machine, in_review_claim):
        rejected = state_machine.decide(
            in_review_claim, ClaimDecision(status=ClaimStatus.REJECTED, decision_reason="No cover")
        )
        with pytest.raises(TransitionError, match="claim must be APPROVED or PARTIALLY_APPROVED"):
            state_machine.pay(rejected)

    def test_pay_in_review_fails(self, state_machine, in_review_claim):
        with pytest.raises(TransitionError):
            state_machine.pay(in_review_claim)
