"""
SQLAlchemy Base Model and mixins for the record tables.
Source: https://docs.sqlalchemy.org/en/20/orm/declarative_mixins.html
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, MetaData, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all record models."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class TimeStampedModel:
    """Mixin for records with created_at and updated_at timestamps.

    ``created_at`` is written explicitly where the record carries its own
    creation time (claims, quotes); otherwise the database default applies.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class VersionedModel:
    """Mixin for records saved under an optimistic version check."""

    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
