"""
Claim Status Presentation.

Derives the customer-facing status readout (label, message, next step,
payout state and money breakdown) from a claim's fields. Pure: the
claim is never modified. Works on anything exposing the claim
attributes, so ORM rows and raw status strings are accepted too.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from claimdesk.core.enums import ClaimStatus, PaymentState
from claimdesk.schemas.claim import AmountBreakdown, ClaimStatusView


@dataclass(frozen=True)
class StatusTemplate:
    """Copy shown for one claim status."""

    label: str
    message: str
    next_step_hint: str


STATUS_TEMPLATES: dict[str, StatusTemplate] = {
    ClaimStatus.SUBMITTED.value: StatusTemplate(
        label="Submitted",
        message="Your claim has been received and is awaiting assessment.",
        next_step_hint="A claims officer will start reviewing your claim shortly.",
    ),
    ClaimStatus.IN_REVIEW.value: StatusTemplate(
        label="In Review",
        message="Your claim is being assessed by a claims officer.",
        next_step_hint="No action is needed from you; you will be notified once a decision is made.",
    ),
    ClaimStatus.APPROVED.value: StatusTemplate(
        label="Approved",
        message="Your claim has been approved for {approved_amount}.",
        next_step_hint="Payment of the approved amount is being arranged.",
    ),
    ClaimStatus.PARTIALLY_APPROVED.value: StatusTemplate(
        label="Partially Approved",
        message="Your claim has been partially approved for {approved_amount} of {claimed_amount} claimed.",
        next_step_hint="Payment of the approved amount is being arranged; see the decision reason for the remainder.",
    ),
    ClaimStatus.REJECTED.value: StatusTemplate(
        label="Rejected",
        message="Your claim has been rejected.",
        next_step_hint="Review the decision reason and contact support if you have questions.",
    ),
    ClaimStatus.PAID.value: StatusTemplate(
        label="Paid",
        message="Payment of {approved_amount} was issued on {paid_at}.",
        next_step_hint="No further action is required.",
    ),
}

GENERIC_TEMPLATE = StatusTemplate(
    label="{label}",
    message="Your claim status is {label}.",
    next_step_hint="Contact support for more details about your claim.",
)


def _status_value(status: Any) -> str:
    if isinstance(status, ClaimStatus):
        return status.value
    return str(status or "")


def _money(amount: Optional[Decimal]) -> str:
    if amount is None:
        return "the approved amount"
    return f"{Decimal(amount):.2f}"


def _date(value: Optional[datetime]) -> str:
    if value is None:
        return "the payment date"
    return value.strftime("%Y-%m-%d")


def derive_payment_state(claim: Any) -> PaymentState:
    """Payout state: PAID, PENDING (approved, unpaid) or NOT_APPLICABLE."""
    status = _status_value(getattr(claim, "status", None))
    if status == ClaimStatus.PAID.value or getattr(claim, "paid_at", None) is not None:
        return PaymentState.PAID
    if status in (ClaimStatus.APPROVED.value, ClaimStatus.PARTIALLY_APPROVED.value):
        return PaymentState.PENDING
    return PaymentState.NOT_APPLICABLE


def build_amount_breakdown(claim: Any) -> AmountBreakdown:
    """Money figures: claimed always, the rest only once set."""
    status = _status_value(getattr(claim, "status", None))
    claimed = Decimal(claim.amount)
    approved = getattr(claim, "approved_amount", None)

    rejected = None
    if status == ClaimStatus.REJECTED.value:
        rejected = claimed
    elif status == ClaimStatus.PARTIALLY_APPROVED.value and approved is not None:
        rejected = max(Decimal("0"), claimed - Decimal(approved))

    return AmountBreakdown(
        claimed_amount=claimed,
        eligible_amount=getattr(claim, "eligible_amount", None),
        deductible=getattr(claim, "deductible", None),
        approved_amount=approved,
        rejected_amount=rejected,
    )


def describe_status(claim: Any) -> ClaimStatusView:
    """
    Build the customer-facing status view of a claim.

    Args:
        claim: Claim (or any object with the same attributes)

    Returns:
        ClaimStatusView with interpolated label, message and next step
    """
    status = _status_value(getattr(claim, "status", None))
    template = STATUS_TEMPLATES.get(status)
    reason = getattr(claim, "decision_reason", None)

    values = {
        "label": status.replace("_", " ").title() if status else "Unknown",
        "approved_amount": _money(getattr(claim, "approved_amount", None)),
        "claimed_amount": _money(claim.amount),
        "paid_at": _date(getattr(claim, "paid_at", None)),
    }

    if template is None:
        template = GENERIC_TEMPLATE

    message = template.message.format(**values)
    if reason and status in (
        ClaimStatus.APPROVED.value,
        ClaimStatus.PARTIALLY_APPROVED.value,
        ClaimStatus.REJECTED.value,
    ):
        message = f"{message} Reason: {reason}"

    return ClaimStatusView(
        status=status,
        label=template.label.format(**values),
        message=message,
        next_step_hint=template.next_step_hint.format(**values),
        payment_status=derive_payment_state(claim),
        amount_breakdown=build_amount_breakdown(claim),
    )
