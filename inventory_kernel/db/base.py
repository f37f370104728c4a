"""
Module: inventory_kernel.db.base
Responsibility: Declarative base classes for all SQLAlchemy ORM models.
    Provides the type annotation map for consistent column types, the
    TrackedBase mixin for timestamps and the EntityBase mixin for integer
    surrogate keys.
Architecture position: Kernel > DB.  Lowest-level import target within the
    kernel.  MUST NOT import from models/, selectors/ or outer layers.

Invariants enforced:
    - Price precision: Decimal maps to Numeric(10, 2).  Prices are never
      floats on the Python side.
    - Timestamps are timezone-aware.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar

from sqlalchemy import DateTime, Integer, Numeric, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """
    Declarative base for all SQLAlchemy models.

    Guarantees:
        - Decimal maps to Numeric(10, 2).
        - datetime maps to DateTime(timezone=True).
        - int maps to Integer (SQLite only autoincrements INTEGER keys).
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(10, 2),
        datetime: DateTime(timezone=True),
        int: Integer,
    }


class TrackedBase(Base):
    """
    Abstract base with creation/update timestamps.

    created_at is normally stamped by the reconciler from its injected
    Clock so that insertion order is observable at sub-second resolution;
    the server default only covers rows written outside the pipeline.
    updated_at auto-updates on every UPDATE.
    """

    __abstract__ = True

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


class EntityBase(TrackedBase):
    """Abstract base for entities identified by an integer surrogate key."""

    __abstract__ = True

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
