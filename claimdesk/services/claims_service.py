"""
Claims Service.

Orchestrates the brokerage core over a record store:
- Claim submission (eligibility checks, coverage readout)
- Claim lifecycle (assessment, decision, payout) with version-checked saves
- Customer-facing claim status
- Quote requests and decisions, policy issuance and maintenance
- Audit event callbacks after each successful operation
"""

import asyncio
from datetime import date
from typing import Any, Awaitable, Callable, Iterable, Optional, Union

from claimdesk.config.plans import PlanTable, get_plan_table
from claimdesk.core.config import BrokerageSettings, get_settings
from claimdesk.core.enums import AuditAction, ClaimStatus, PolicyStatus, QuoteStatus
from claimdesk.schemas.audit import AuditEvent
from claimdesk.schemas.claim import (
    Attachment,
    Claim,
    ClaimDecision,
    ClaimStatusView,
    ClaimSubmission,
    ClaimSubmissionResult,
)
from claimdesk.schemas.policy import Policy
from claimdesk.schemas.product import Product
from claimdesk.schemas.quote import Quote, QuoteRequest
from claimdesk.services.adapters.base import RecordStore
from claimdesk.services.claim_state_machine import ClaimStateMachine
from claimdesk.services.plan_resolver import build_coverage_info
from claimdesk.services.quote_service import QuoteService
from claimdesk.services.status_presenter import describe_status
from claimdesk.utils.errors import RecordNotFoundError
from claimdesk.utils.logging import get_logger

logger = get_logger(__name__)

AuditCallback = Callable[[AuditEvent], Union[None, Awaitable[None]]]


class ClaimsService:
    """
    Entry point for claim and quote workflows.

    Every mutating operation loads the current record, applies the
    transition, and saves it back. Claim and quote saves carry the version that
    was loaded, so a concurrent writer makes the later save fail with
    ConcurrencyConflictError and the record keeps the first result.
    """

    def __init__(
        self,
        store: RecordStore,
        plan_table: Optional[PlanTable] = None,
        settings: Optional[BrokerageSettings] = None,
        state_machine: Optional[ClaimStateMachine] = None,
        quote_service: Optional[QuoteService] = None,
    ):
        """
        Initialize claims service.

        Args:
            store: Record store for products, policies, quotes and claims
            plan_table: Plan tier table; the one named by settings when omitted
            settings: Brokerage settings; global settings when omitted
            state_machine: Claim lifecycle; built from settings when omitted
            quote_service: Quote pricing and issuance; built from settings when omitted
        """
        self.store = store
        self.settings = settings or get_settings()
        self.plan_table = plan_table or get_plan_table(self.settings)
        self.state_machine = state_machine or ClaimStateMachine(
            limit_multiplier=self.settings.CLAIM_LIMIT_MULTIPLIER
        )
        self.quote_service = quote_service or QuoteService.from_settings(self.settings)
        self._callbacks: list[AuditCallback] = []

    # =========================================================================
    # Audit Callbacks
    # =========================================================================

    def register_callback(self, callback: AuditCallback) -> None:
        """Register a callback notified with an AuditEvent after each operation."""
        self._callbacks.append(callback)

    def unregister_callback(self, callback: AuditCallback) -> None:
        """Remove a previously registered callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    async def _emit(
        self,
        action: AuditAction,
        entity_type: str,
        entity_id: str,
        actor_id: Optional[str] = None,
        **metadata: Any,
    ) -> None:
        event = AuditEvent(
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            actor_id=actor_id,
            metadata=metadata,
        )
        for callback in list(self._callbacks):
            try:
                if asyncio.iscoroutinefunction(callback):
                    await callback(event)
                else:
                    callback(event)
            except Exception as e:
                logger.warning(f"Audit callback error for {action.value} on {entity_id}: {e}")

    # =========================================================================
    # Loading
    # =========================================================================

    async def _load_product(self, product_id: str) -> Product:
        product = await self.store.get_product(product_id)
        if product is None:
            raise RecordNotFoundError("Product", product_id)
        return product

    async def _load_policy(
        self,
        policy_id: Optional[str] = None,
        policy_number: Optional[str] = None,
    ) -> Policy:
        if policy_id:
            policy = await self.store.get_policy(policy_id)
            lookup = policy_id
        elif policy_number:
            policy = await self.store.get_policy_by_number(policy_number)
            lookup = policy_number
        else:
            raise ValueError("Either policy_id or policy_number is required")

        if policy is None:
            raise RecordNotFoundError("Policy", lookup)
        return policy

    async def _load_quote(self, quote_id: str) -> Quote:
        quote = await self.store.get_quote(quote_id)
        if quote is None:
            raise RecordNotFoundError("Quote", quote_id)
        return quote

    async def _load_claim(self, claim_id: str) -> Claim:
        claim = await self.store.get_claim(claim_id)
        if claim is None:
            raise RecordNotFoundError("Claim", claim_id)
        return claim

    # =========================================================================
    # Claims
    # =========================================================================

    async def submit_claim(
        self,
        claimant_id: str,
        payload: ClaimSubmission,
        policy_id: Optional[str] = None,
        policy_number: Optional[str] = None,
        attachments: Iterable[Attachment] = (),
    ) -> ClaimSubmissionResult:
        """
        Submit a claim under a policy.

        The policy is looked up by id, or by policy number when no id is
        given.

        Returns:
            The persisted SUBMITTED claim and its advisory coverage info

        Raises:
            RecordNotFoundError: Policy or product missing
            ClaimValidationError: Eligibility checks failed; nothing persisted
        """
        policy = await self._load_policy(policy_id, policy_number)
        product = await self._load_product(policy.product_id)

        claim = self.state_machine.submit(policy, product, payload, claimant_id, attachments)
        claim = await self.store.add_claim(claim)

        coverage_info = build_coverage_info(
            policy, product, claim.amount, claim.claim_type, self.plan_table
        )
        await self._emit(
            AuditAction.CLAIM_SUBMITTED,
            "claim",
            claim.id,
            actor_id=claimant_id,
            policy_id=policy.id,
            amount=str(claim.amount),
        )
        return ClaimSubmissionResult(claim=claim, coverage_info=coverage_info)

    async def start_assessment(self, claim_id: str, actor_id: Optional[str] = None) -> Claim:
        """Move a SUBMITTED claim to IN_REVIEW."""
        claim = await self._load_claim(claim_id)
        updated = self.state_machine.assess(claim, assessed_by=actor_id)
        saved = await self.store.save_claim(updated, expected_version=claim.version)
        await self._emit(
            AuditAction.for_claim_status(saved.status), "claim", saved.id, actor_id=actor_id
        )
        return saved

    async def decide_claim(
        self,
        claim_id: str,
        decision: ClaimDecision,
        actor_id: Optional[str] = None,
    ) -> Claim:
        """
        Record an assessor's decision on an IN_REVIEW claim.

        Raises:
            TransitionError: Claim not IN_REVIEW, bad target, or blank reason
            ConcurrencyConflictError: Claim changed since it was loaded
        """
        claim = await self._load_claim(claim_id)
        updated = self.state_machine.decide(claim, decision, assessed_by=actor_id)
        saved = await self.store.save_claim(updated, expected_version=claim.version)
        await self._emit(
            AuditAction.for_claim_status(saved.status),
            "claim",
            saved.id,
            actor_id=actor_id,
            approved_amount=str(saved.approved_amount) if saved.approved_amount is not None else None,
            reason=saved.decision_reason,
        )
        return saved

    async def pay_claim(self, claim_id: str, actor_id: Optional[str] = None) -> Claim:
        """Mark an approved claim as paid."""
        claim = await self._load_claim(claim_id)
        updated = self.state_machine.pay(claim)
        saved = await self.store.save_claim(updated, expected_version=claim.version)
        await self._emit(
            AuditAction.CLAIM_PAID,
            "claim",
            saved.id,
            actor_id=actor_id,
            amount=str(saved.approved_amount),
        )
        return saved

    async def claim_status(self, claim_id: str) -> ClaimStatusView:
        """Customer-facing status readout of a claim."""
        return describe_status(await self._load_claim(claim_id))

    async def get_claim(self, claim_id: str) -> Claim:
        return await self._load_claim(claim_id)

    async def list_claims(
        self,
        policy_id: Optional[str] = None,
        claimant_id: Optional[str] = None,
        status: Optional[ClaimStatus] = None,
    ) -> list[Claim]:
        return await self.store.list_claims(
            policy_id=policy_id, claimant_id=claimant_id, status=status
        )

    # =========================================================================
    # Quotes & Policies
    # =========================================================================

    async def request_quote(self, request: QuoteRequest, requester_id: str) -> Quote:
        """Price and store a PENDING quote."""
        product = await self._load_product(request.product_id)
        quote = self.quote_service.create_quote(product, requester_id, request.metadata)
        quote = await self.store.add_quote(quote)
        await self._emit(
            AuditAction.QUOTE_CREATED,
            "quote",
            quote.id,
            actor_id=requester_id,
            premium=str(quote.premium),
        )
        return quote

    async def decide_quote(
        self,
        quote_id: str,
        status: QuoteStatus,
        actor_id: Optional[str] = None,
    ) -> tuple[Quote, Optional[Policy]]:
        """
        Approve or reject a pending quote.

        Approval issues the policy for the quote straight away.

        Returns:
            The decided quote and, on approval, the issued policy

        Raises:
            QuoteStateError: Quote not pending
            ConcurrencyConflictError: Quote changed since it was loaded
        """
        quote = await self._load_quote(quote_id)
        decided = await self.store.save_quote(
            self.quote_service.decide_quote(quote, status), expected_version=quote.version
        )
        action = (
            AuditAction.QUOTE_APPROVED if status == QuoteStatus.APPROVED else AuditAction.QUOTE_REJECTED
        )
        await self._emit(action, "quote", decided.id, actor_id=actor_id)

        if decided.status != QuoteStatus.APPROVED:
            return decided, None

        policy, linked = await self._issue(decided, actor_id=actor_id)
        return linked, policy

    async def issue_policy(
        self,
        quote_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        premium_paid: bool = False,
        actor_id: Optional[str] = None,
    ) -> Policy:
        """
        Issue the policy for an approved quote.

        Raises:
            QuoteStateError: Quote not approved or already issued, or bad dates
            ConcurrencyConflictError: Quote changed since it was loaded
        """
        quote = await self._load_quote(quote_id)
        policy, _ = await self._issue(quote, start_date, end_date, premium_paid, actor_id)
        return policy

    async def _issue(
        self,
        quote: Quote,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        premium_paid: bool = False,
        actor_id: Optional[str] = None,
    ) -> tuple[Policy, Quote]:
        policy, linked = self.quote_service.issue_policy(quote, start_date, end_date, premium_paid)
        # Linking the quote first lets only one issuer insert the policy.
        linked = await self.store.save_quote(linked, expected_version=quote.version)
        policy = await self.store.add_policy(policy)
        await self._emit(
            AuditAction.POLICY_ISSUED,
            "policy",
            policy.id,
            actor_id=actor_id,
            policy_number=policy.policy_number,
            quote_id=quote.id,
        )
        return policy, linked

    async def update_policy_status(
        self,
        policy_id: str,
        status: PolicyStatus,
        actor_id: Optional[str] = None,
    ) -> Policy:
        """Set a policy's status."""
        policy = await self._load_policy(policy_id)
        previous = policy.status
        updated = await self.store.save_policy(
            self.quote_service.update_policy_status(policy, status)
        )
        await self._emit(
            AuditAction.POLICY_UPDATED,
            "policy",
            updated.id,
            actor_id=actor_id,
            previous_status=previous.value,
            status=updated.status.value,
        )
        return updated

    async def record_premium_payment(self, policy_id: str, actor_id: Optional[str] = None) -> Policy:
        """Mark a policy's premium as paid."""
        policy = await self._load_policy(policy_id)
        updated = await self.store.save_policy(self.quote_service.record_premium_payment(policy))
        await self._emit(AuditAction.PREMIUM_PAID, "policy", updated.id, actor_id=actor_id)
        return updated
