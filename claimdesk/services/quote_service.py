"""
Quote & Policy Issuance Service.

Provides:
- Quote pricing (premium fixed once, at creation)
- Quote decisions: PENDING -> APPROVED | REJECTED
- Policy issuance from an approved quote (one policy per quote)
- Policy status changes and premium payment recording
"""

import calendar
import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, Mapping, Optional

from claimdesk.core.enums import PolicyStatus, QuoteStatus
from claimdesk.schemas.policy import Policy
from claimdesk.schemas.product import Product
from claimdesk.schemas.quote import Quote
from claimdesk.services.premium_service import RatingFactors, compute_premium
from claimdesk.utils.errors import QuoteStateError

logger = logging.getLogger(__name__)


def add_months(start: date, months: int) -> date:
    """Shift a date by whole months, clamping to the target month's end."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


class QuoteService:
    """
    Prices quotes and turns approved quotes into policies.

    Operates on records handed in by the caller and returns updated
    copies; persistence is the caller's job.
    """

    def __init__(
        self,
        factors: Optional[RatingFactors] = None,
        term_months: int = 12,
        policy_number_prefix: str = "POL",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize quote service.

        Args:
            factors: Rating loadings; standard tariff when omitted
            term_months: Default coverage term of issued policies
            policy_number_prefix: Prefix of generated policy numbers
            clock: Source of "now" (UTC)
        """
        self.factors = factors or RatingFactors()
        self.term_months = term_months
        self.policy_number_prefix = policy_number_prefix
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def from_settings(cls, settings=None) -> "QuoteService":
        """Build a service configured from ``BrokerageSettings``."""
        if settings is None:
            from claimdesk.core.config import get_settings

            settings = get_settings()
        return cls(
            factors=RatingFactors.from_settings(settings),
            term_months=settings.POLICY_TERM_MONTHS,
            policy_number_prefix=settings.POLICY_NUMBER_PREFIX,
        )

    # =========================================================================
    # Quotes
    # =========================================================================

    def create_quote(
        self,
        product: Product,
        requester_id: str,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Quote:
        """Price a new PENDING quote for ``product``."""
        metadata = dict(metadata or {})
        premium = compute_premium(product.base_premium, metadata, self.factors)
        quote = Quote(
            product_id=product.id,
            requester_id=requester_id,
            metadata=metadata,
            premium=premium,
            status=QuoteStatus.PENDING,
            created_at=self._clock(),
        )
        logger.info(f"Quote {quote.id} priced at {premium} for product {product.id}")
        return quote

    def decide_quote(self, quote: Quote, status: QuoteStatus) -> Quote:
        """
        Approve or reject a pending quote.

        Transitions: PENDING -> APPROVED | REJECTED
        """
        if quote.status != QuoteStatus.PENDING:
            raise QuoteStateError(
                f"Only PENDING quotes can be decided, current: {quote.status.value}"
            )
        if status not in (QuoteStatus.APPROVED, QuoteStatus.REJECTED):
            raise QuoteStateError(f"Quote decision must be APPROVED or REJECTED, got {status.value}")

        logger.info(f"Quote {quote.id} {status.value.lower()}")
        return quote.model_copy(update={"status": status})

    # =========================================================================
    # Policies
    # =========================================================================

    def generate_policy_number(self, quote: Quote) -> str:
        """Build ``{prefix}-{epoch_ms}-{quote id}``."""
        epoch_ms = int(self._clock().timestamp() * 1000)
        return f"{self.policy_number_prefix}-{epoch_ms}-{quote.id.replace('-', '').upper()}"

    def issue_policy(
        self,
        quote: Quote,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        premium_paid: bool = False,
    ) -> tuple[Policy, Quote]:
        """
        Issue the policy for an approved quote.

        The term defaults to today through today plus the configured
        number of months. The premium is copied from the quote.

        Returns:
            The new policy and the quote linked to it

        Raises:
            QuoteStateError: Quote not approved, already issued, or bad dates
        """
        if quote.status != QuoteStatus.APPROVED:
            raise QuoteStateError("Quote must be approved before issuing policy")
        if quote.policy_id:
            raise QuoteStateError("A policy already exists for this quote")

        start = start_date or self._clock().date()
        end = end_date or add_months(start, self.term_months)
        if end <= start:
            raise QuoteStateError("Policy end date must be after start date")

        policy = Policy(
            policy_number=self.generate_policy_number(quote),
            product_id=quote.product_id,
            policyholder_id=quote.requester_id,
            quote_id=quote.id,
            premium=quote.premium,
            start_date=start,
            end_date=end,
            status=PolicyStatus.ACTIVE,
            premium_paid=bool(premium_paid),
        )
        logger.info(f"Policy {policy.policy_number} issued from quote {quote.id}")
        return policy, quote.model_copy(update={"policy_id": policy.id})

    def update_policy_status(self, policy: Policy, status: PolicyStatus) -> Policy:
        """Set a policy's status (ACTIVE, LAPSED, CANCELLED, RENEWED)."""
        if status == policy.status:
            return policy
        logger.info(f"Policy {policy.policy_number}: {policy.status.value} -> {status.value}")
        return policy.model_copy(update={"status": status})

    def record_premium_payment(self, policy: Policy) -> Policy:
        """Mark the policy premium as paid."""
        return policy.model_copy(update={"premium_paid": True})
