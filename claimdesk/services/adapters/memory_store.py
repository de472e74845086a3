"""
In-Memory Record Store.

Dict-backed store for tests and demos. Records are copied on the way in
and out so callers never share state with the store.
"""

import asyncio
from typing import Optional, TypeVar

from pydantic import BaseModel

from claimdesk.core.enums import ClaimStatus
from claimdesk.schemas.claim import Claim
from claimdesk.schemas.policy import Policy
from claimdesk.schemas.product import Product
from claimdesk.schemas.quote import Quote
from claimdesk.services.adapters.base import RecordStore
from claimdesk.utils.errors import ConcurrencyConflictError, RecordNotFoundError

T = TypeVar("T", bound=BaseModel)


def _copy(record: Optional[T]) -> Optional[T]:
    return record.model_copy(deep=True) if record is not None else None


class InMemoryRecordStore(RecordStore):
    """Record store holding everything in process memory."""

    def __init__(self):
        self._products: dict[str, Product] = {}
        self._policies: dict[str, Policy] = {}
        self._quotes: dict[str, Quote] = {}
        self._claims: dict[str, Claim] = {}
        self._lock = asyncio.Lock()

    # Products
    async def get_product(self, product_id: str) -> Optional[Product]:
        return _copy(self._products.get(product_id))

    async def add_product(self, product: Product) -> Product:
        self._products[product.id] = _copy(product)
        return _copy(product)

    # Policies
    async def get_policy(self, policy_id: str) -> Optional[Policy]:
        return _copy(self._policies.get(policy_id))

    async def get_policy_by_number(self, policy_number: str) -> Optional[Policy]:
        for policy in self._policies.values():
            if policy.policy_number == policy_number:
                return _copy(policy)
        return None

    async def add_policy(self, policy: Policy) -> Policy:
        self._policies[policy.id] = _copy(policy)
        return _copy(policy)

    async def save_policy(self, policy: Policy) -> Policy:
        if policy.id not in self._policies:
            raise RecordNotFoundError("Policy", policy.id)
        self._policies[policy.id] = _copy(policy)
        return _copy(policy)

    # Quotes
    async def get_quote(self, quote_id: str) -> Optional[Quote]:
        return _copy(self._quotes.get(quote_id))

    async def add_quote(self, quote: Quote) -> Quote:
        self._quotes[quote.id] = _copy(quote)
        return _copy(quote)

    async def save_quote(self, quote: Quote, expected_version: int) -> Quote:
        async with self._lock:
            stored = self._quotes.get(quote.id)
            if stored is None:
                raise RecordNotFoundError("Quote", quote.id)
            if stored.version != expected_version:
                raise ConcurrencyConflictError("Quote", quote.id, expected_version)
            saved = quote.model_copy(update={"version": expected_version + 1}, deep=True)
            self._quotes[quote.id] = saved
        return _copy(saved)

    # Claims
    async def get_claim(self, claim_id: str) -> Optional[Claim]:
        return _copy(self._claims.get(claim_id))

    async def list_claims(
        self,
        policy_id: Optional[str] = None,
        claimant_id: Optional[str] = None,
        status: Optional[ClaimStatus] = None,
    ) -> list[Claim]:
        claims = [
            claim
            for claim in self._claims.values()
            if (policy_id is None or claim.policy_id == policy_id)
            and (claimant_id is None or claim.claimant_id == claimant_id)
            and (status is None or claim.status == status)
        ]
        claims.sort(key=lambda c: c.created_at, reverse=True)
        return [_copy(claim) for claim in claims]

    async def add_claim(self, claim: Claim) -> Claim:
        async with self._lock:
            self._claims[claim.id] = _copy(claim)
        return _copy(claim)

    async def save_claim(self, claim: Claim, expected_version: int) -> Claim:
        async with self._lock:
            stored = self._claims.get(claim.id)
            if stored is None:
                raise RecordNotFoundError("Claim", claim.id)
            if stored.version != expected_version:
                raise ConcurrencyConflictError("Claim", claim.id, expected_version)
            saved = claim.model_copy(update={"version": expected_version + 1}, deep=True)
            self._claims[claim.id] = saved
        return _copy(saved)
