"""
Module: inventory_kernel.models.store_book
Responsibility: ORM persistence for inventory positions -- one row per
    (store, book) pair carrying price, copy count and sold-out status.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - One position per (store_id, book_id) pair (uq_store_book_pair); the
      surrogate id follows insertion order and breaks report ties.
    - price >= 0 (ck_store_book_price), copies >= 0 (ck_store_book_copies).
    - copies only ever grows through ingestion: re-ingesting a pair adds one
      copy, overwrites price and clears sold_out (see
      inventory_ingestion.reconcilers.inventory).
"""

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory_kernel.db.base import EntityBase

if TYPE_CHECKING:
    from inventory_kernel.models.book import Book
    from inventory_kernel.models.store import Store


class StoreBook(EntityBase):
    """Inventory position of one book in one store."""

    __tablename__ = "store_books"

    __table_args__ = (
        UniqueConstraint("store_id", "book_id", name="uq_store_book_pair"),
        CheckConstraint("price >= 0", name="ck_store_book_price"),
        CheckConstraint("copies >= 0", name="ck_store_book_copies"),
        Index("idx_store_book_store_available", "store_id", "sold_out"),
    )

    store_id: Mapped[int] = mapped_column(
        ForeignKey("stores.id"),
        nullable=False,
    )

    book_id: Mapped[int] = mapped_column(
        ForeignKey("books.id"),
        nullable=False,
    )

    price: Mapped[Decimal] = mapped_column(nullable=False)

    copies: Mapped[int] = mapped_column(nullable=False, default=1)

    sold_out: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    store: Mapped["Store"] = relationship("Store", back_populates="inventory")

    book: Mapped["Book"] = relationship("Book", back_populates="inventory")

    def restock(self, price: Decimal) -> None:
        """Apply a repeated ingestion: one more copy, latest price, available."""
        self.copies = self.copies + 1
        self.price = price
        self.sold_out = False

    def __repr__(self) -> str:
        return (
            f"<StoreBook store={self.store_id} book={self.book_id} "
            f"price={self.price} copies={self.copies}>"
        )
