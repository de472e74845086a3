"""
SQLAlchemy Record Store.

Persists products, policies, quotes and claims through an async
session factory. Claim and quote saves use a conditional UPDATE on the
version column, so a stale writer updates zero rows and gets a conflict.
"""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from claimdesk.core.enums import ClaimStatus
from claimdesk.models.records import ClaimRecord, PolicyRecord, ProductRecord, QuoteRecord
from claimdesk.schemas.claim import Claim
from claimdesk.schemas.policy import Policy
from claimdesk.schemas.product import Product
from claimdesk.schemas.quote import Quote
from claimdesk.services.adapters.base import RecordStore
from claimdesk.utils.errors import ConcurrencyConflictError, RecordNotFoundError
from claimdesk.utils.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Row <-> schema mapping
# =============================================================================


def _quote_from_row(row: QuoteRecord) -> Quote:
    return Quote(
        id=row.id,
        product_id=row.product_id,
        requester_id=row.requester_id,
        metadata=dict(row.applicant_metadata or {}),
        premium=row.premium,
        status=row.status,
        version=row.version,
        policy_id=row.policy_id,
        created_at=row.created_at,
    )


def _quote_values(quote: Quote) -> dict:
    return {
        "product_id": quote.product_id,
        "requester_id": quote.requester_id,
        "applicant_metadata": dict(quote.metadata),
        "premium": quote.premium,
        "status": quote.status,
        "version": quote.version,
        "policy_id": quote.policy_id,
    }


def _policy_values(policy: Policy) -> dict:
    return policy.model_dump(exclude={"id"})


def _claim_values(claim: Claim) -> dict:
    values = claim.model_dump(exclude={"id", "version", "created_at"})
    return values


class SqlRecordStore(RecordStore):
    """Record store backed by SQLAlchemy (PostgreSQL, SQLite, ...)."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    # Products
    async def get_product(self, product_id: str) -> Optional[Product]:
        async with self._session_maker() as session:
            row = await session.get(ProductRecord, product_id)
            return Product.model_validate(row) if row else None

    async def add_product(self, product: Product) -> Product:
        async with self._session_maker() as session:
            session.add(ProductRecord(**product.model_dump()))
            await session.commit()
        return product

    # Policies
    async def get_policy(self, policy_id: str) -> Optional[Policy]:
        async with self._session_maker() as session:
            row = await session.get(PolicyRecord, policy_id)
            return Policy.model_validate(row) if row else None

    async def get_policy_by_number(self, policy_number: str) -> Optional[Policy]:
        async with self._session_maker() as session:
            result = await session.execute(
                select(PolicyRecord).where(PolicyRecord.policy_number == policy_number)
            )
            row = result.scalar_one_or_none()
            return Policy.model_validate(row) if row else None

    async def add_policy(self, policy: Policy) -> Policy:
        async with self._session_maker() as session:
            session.add(PolicyRecord(id=policy.id, **_policy_values(policy)))
            await session.commit()
        return policy

    async def save_policy(self, policy: Policy) -> Policy:
        async with self._session_maker() as session:
            result = await session.execute(
                update(PolicyRecord)
                .where(PolicyRecord.id == policy.id)
                .values(**_policy_values(policy))
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise RecordNotFoundError("Policy", policy.id)
            await session.commit()
        return policy

    # Quotes
    async def get_quote(self, quote_id: str) -> Optional[Quote]:
        async with self._session_maker() as session:
            row = await session.get(QuoteRecord, quote_id)
            return _quote_from_row(row) if row else None

    async def add_quote(self, quote: Quote) -> Quote:
        async with self._session_maker() as session:
            session.add(QuoteRecord(id=quote.id, created_at=quote.created_at, **_quote_values(quote)))
            await session.commit()
        return quote

    async def save_quote(self, quote: Quote, expected_version: int) -> Quote:
        values = _quote_values(quote)
        values["version"] = expected_version + 1
        async with self._session_maker() as session:
            result = await session.execute(
                update(QuoteRecord)
                .where(QuoteRecord.id == quote.id, QuoteRecord.version == expected_version)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await session.rollback()
                exists = await session.scalar(select(QuoteRecord.id).where(QuoteRecord.id == quote.id))
                if exists is None:
                    raise RecordNotFoundError("Quote", quote.id)
                logger.warning(f"Version conflict saving quote {quote.id} (expected v{expected_version})")
                raise ConcurrencyConflictError("Quote", quote.id, expected_version)
            await session.commit()

        return quote.model_copy(update={"version": expected_version + 1})

    # Claims
    async def get_claim(self, claim_id: str) -> Optional[Claim]:
        async with self._session_maker() as session:
            row = await session.get(ClaimRecord, claim_id)
            return Claim.model_validate(row) if row else None

    async def list_claims(
        self,
        policy_id: Optional[str] = None,
        claimant_id: Optional[str] = None,
        status: Optional[ClaimStatus] = None,
    ) -> list[Claim]:
        stmt = select(ClaimRecord)
        if policy_id is not None:
            stmt = stmt.where(ClaimRecord.policy_id == policy_id)
        if claimant_id is not None:
            stmt = stmt.where(ClaimRecord.claimant_id == claimant_id)
        if status is not None:
            stmt = stmt.where(ClaimRecord.status == status)
        stmt = stmt.order_by(ClaimRecord.created_at.desc())

        async with self._session_maker() as session:
            result = await session.execute(stmt)
            return [Claim.model_validate(row) for row in result.scalars().all()]

    async def add_claim(self, claim: Claim) -> Claim:
        async with self._session_maker() as session:
            session.add(
                ClaimRecord(
                    id=claim.id,
                    version=claim.version,
                    created_at=claim.created_at,
                    **_claim_values(claim),
                )
            )
            await session.commit()
        return claim

    async def save_claim(self, claim: Claim, expected_version: int) -> Claim:
        async with self._session_maker() as session:
            result = await session.execute(
                update(ClaimRecord)
                .where(ClaimRecord.id == claim.id, ClaimRecord.version == expected_version)
                .values(version=expected_version + 1, **_claim_values(claim))
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await session.rollback()
                exists = await session.scalar(select(ClaimRecord.id).where(ClaimRecord.id == claim.id))
                if exists is None:
                    raise RecordNotFoundError("Claim", claim.id)
                logger.warning(f"Version conflict saving claim {claim.id} (expected v{expected_version})")
                raise ConcurrencyConflictError("Claim", claim.id, expected_version)
            await session.commit()

        return claim.model_copy(update={"version": expected_version + 1})
