"""
Module: inventory_kernel.models.author
Responsibility: ORM persistence for book authors.  Authors are created on
    first reference and never updated or deleted.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - name is globally unique (uq_author_name) and non-empty.
"""

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory_kernel.db.base import EntityBase

if TYPE_CHECKING:
    from inventory_kernel.models.book import Book


class Author(EntityBase):
    """A book author identified by name."""

    __tablename__ = "authors"

    __table_args__ = (
        UniqueConstraint("name", name="uq_author_name"),
        CheckConstraint("length(name) > 0", name="ck_author_name"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    books: Mapped[list["Book"]] = relationship(
        "Book",
        back_populates="author",
    )

    def __repr__(self) -> str:
        return f"<Author {self.id}: {self.name}>"
