"""
Record Store Interface.

The claims core loads records by id and saves whole records back. Claim
saves are guarded by an optimistic version check so that at most one
concurrent transition on a claim succeeds.
"""

from abc import ABC, abstractmethod
from typing import Optional

from claimdesk.core.enums import ClaimStatus
from claimdesk.schemas.claim import Claim
from claimdesk.schemas.policy import Policy
from claimdesk.schemas.product import Product
from claimdesk.schemas.quote import Quote


class RecordStore(ABC):
    """
    Abstract base class for record stores.

    Implementations: in-memory (tests, demos) and SQLAlchemy.
    """

    # Products
    @abstractmethod
    async def get_product(self, product_id: str) -> Optional[Product]:
        """Get product by ID."""

    @abstractmethod
    async def add_product(self, product: Product) -> Product:
        """Store a new product."""

    # Policies
    @abstractmethod
    async def get_policy(self, policy_id: str) -> Optional[Policy]:
        """Get policy by ID."""

    @abstractmethod
    async def get_policy_by_number(self, policy_number: str) -> Optional[Policy]:
        """Get policy by its external policy number."""

    @abstractmethod
    async def add_policy(self, policy: Policy) -> Policy:
        """Store a newly issued policy."""

    @abstractmethod
    async def save_policy(self, policy: Policy) -> Policy:
        """Overwrite an existing policy."""

    # Quotes
    @abstractmethod
    async def get_quote(self, quote_id: str) -> Optional[Quote]:
        """Get quote by ID."""

    @abstractmethod
    async def add_quote(self, quote: Quote) -> Quote:
        """Store a new quote."""

    @abstractmethod
    async def save_quote(self, quote: Quote, expected_version: int) -> Quote:
        """
        Save a quote if nobody saved it since ``expected_version``.

        Raises:
            RecordNotFoundError: Quote missing
            ConcurrencyConflictError: Stored version differs
        """

    # Claims
    @abstractmethod
    async def get_claim(self, claim_id: str) -> Optional[Claim]:
        """Get claim by ID."""

    @abstractmethod
    async def list_claims(
        self,
        policy_id: Optional[str] = None,
        claimant_id: Optional[str] = None,
        status: Optional[ClaimStatus] = None,
    ) -> list[Claim]:
        """List claims, newest first, optionally filtered."""

    @abstractmethod
    async def add_claim(self, claim: Claim) -> Claim:
        """Store a newly submitted claim."""

    @abstractmethod
    async def save_claim(self, claim: Claim, expected_version: int) -> Claim:
        """
        Save a claim if nobody saved it since ``expected_version``.

        Returns:
            The stored claim with its version incremented

        Raises:
            RecordNotFoundError: Claim was never added
            ConcurrencyConflictError: Stored version differs
        """
