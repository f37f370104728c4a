"""
Module: inventory_kernel.models.store
Responsibility: ORM persistence for bookstores.  A Store is created the first
    time an ingested row references its name and is never deleted by the
    ingestion pipeline.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - name is globally unique (uq_store_name) and non-empty (ck_store_name).
    - address / logo are only ever overwritten with non-empty values; the
      reconciler never clears them.

Failure modes:
    - IntegrityError on duplicate name; the reconciler treats this as a
      concurrent create and re-reads the winner.
"""

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory_kernel.db.base import EntityBase

if TYPE_CHECKING:
    from inventory_kernel.models.store_book import StoreBook


class Store(EntityBase):
    """A bookstore identified by its unique name."""

    __tablename__ = "stores"

    __table_args__ = (
        UniqueConstraint("name", name="uq_store_name"),
        CheckConstraint("length(name) > 0", name="ck_store_name"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    address: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # URL or base64 data URI
    logo: Mapped[str | None] = mapped_column(Text, nullable=True)

    inventory: Mapped[list["StoreBook"]] = relationship(
        "StoreBook",
        back_populates="store",
    )

    @property
    def has_embedded_logo(self) -> bool:
        """True when the logo is an inline ``data:image/...`` string."""
        return bool(self.logo) and self.logo.startswith("data:image")

    def __repr__(self) -> str:
        return f"<Store {self.id}: {self.name}>"
