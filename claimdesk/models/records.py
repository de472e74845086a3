"""
ORM records backing the SQL record store.

Products, policies, quotes and claims. Claims carry a ``version``
column used for optimistic concurrency on save.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from claimdesk.core.enums import ClaimStatus, PolicyStatus, ProductType, QuoteStatus
from claimdesk.models.base import Base, TimeStampedModel, VersionedModel

Money = Numeric(14, 2)


class ProductRecord(Base, TimeStampedModel):
    """Insurance product."""

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[ProductType] = mapped_column(Enum(ProductType), nullable=False, index=True)
    base_premium: Mapped[Decimal] = mapped_column(Money, nullable=False)
    exclusions: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)


class QuoteRecord(Base, TimeStampedModel, VersionedModel):
    """Priced quote request."""

    __tablename__ = "quotes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    product_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("products.id", ondelete="RESTRICT"), nullable=False
    )
    requester_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    # "metadata" is reserved on declarative classes
    applicant_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSON, default=dict, nullable=False
    )
    premium: Mapped[Decimal] = mapped_column(Money, nullable=False)
    status: Mapped[QuoteStatus] = mapped_column(Enum(QuoteStatus), nullable=False, index=True)
    policy_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)


class PolicyRecord(Base, TimeStampedModel):
    """Issued policy."""

    __tablename__ = "policies"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    policy_number: Mapped[str] = mapped_column(String(80), unique=True, nullable=False, index=True)
    product_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("products.id", ondelete="RESTRICT"), nullable=False
    )
    policyholder_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    quote_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("quotes.id", ondelete="SET NULL"), nullable=True, unique=True
    )
    premium: Mapped[Decimal] = mapped_column(Money, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[PolicyStatus] = mapped_column(Enum(PolicyStatus), nullable=False)
    premium_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class ClaimRecord(Base, TimeStampedModel, VersionedModel):
    """Claim under a policy, with its lifecycle fields."""

    __tablename__ = "claims"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    policy_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("policies.id", ondelete="RESTRICT"), nullable=False
    )
    claimant_id: Mapped[str] = mapped_column(String(64), nullable=False)
    claim_type: Mapped[ProductType] = mapped_column(Enum(ProductType), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    incident_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    attachments: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)

    status: Mapped[ClaimStatus] = mapped_column(Enum(ClaimStatus), nullable=False)
    eligible_amount: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)
    deductible: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)
    approved_amount: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)
    decision_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    assessed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    assessed_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_claims_policy_status", "policy_id", "status"),
        Index("ix_claims_claimant", "claimant_id"),
    )
