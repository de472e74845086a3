"""
SQLAlchemy Models for the SQL record store.
"""

from claimdesk.models.base import Base, TimeStampedModel, VersionedModel
from claimdesk.models.records import ClaimRecord, PolicyRecord, ProductRecord, QuoteRecord

__all__ = [
    "Base",
    "TimeStampedModel",
    "VersionedModel",
    "ClaimRecord",
    "PolicyRecord",
    "ProductRecord",
    "QuoteRecord",
]
