"""
Module: inventory_kernel.models.book
Responsibility: ORM persistence for books.  A book is identified by the pair
    (name, author) -- the same title by two authors is two books.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - (name, author_id) is unique (uq_book_name_author).
    - pages is NULL or >= 1 (ck_book_pages).
"""

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory_kernel.db.base import EntityBase

if TYPE_CHECKING:
    from inventory_kernel.models.author import Author
    from inventory_kernel.models.store_book import StoreBook


class Book(EntityBase):
    """A title written by one author; pages may be backfilled later."""

    __tablename__ = "books"

    __table_args__ = (
        UniqueConstraint("name", "author_id", name="uq_book_name_author"),
        CheckConstraint("length(name) > 0", name="ck_book_name"),
        CheckConstraint("pages IS NULL OR pages >= 1", name="ck_book_pages"),
        Index("idx_book_author", "author_id"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    pages: Mapped[int | None] = mapped_column(nullable=True)

    author_id: Mapped[int] = mapped_column(
        ForeignKey("authors.id"),
        nullable=False,
    )

    author: Mapped["Author"] = relationship("Author", back_populates="books")

    inventory: Mapped[list["StoreBook"]] = relationship(
        "StoreBook",
        back_populates="book",
    )

    def __repr__(self) -> str:
        return f"<Book {self.id}: {self.name} (author {self.author_id})>"
