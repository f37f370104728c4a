"""
Module: inventory_kernel.selectors.report_selector
Responsibility: Ranking queries over a store's available inventory -- the
    priciest books and the most prolific authors.  Results feed the store
    report renderer.
Architecture position: Kernel > Selectors.  May import from models/ and
    selectors/base.py.

Invariants enforced:
    - Only positions with sold_out = false are ranked.
    - Priciest books: price DESC, ties by insertion order (created_at, then
      position id) so equal prices keep the order in which they were stocked.
    - Prolific authors: distinct book count DESC, then total copies DESC,
      then author name ASC for a deterministic tail.
"""

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import func, select

from inventory_kernel.models.author import Author
from inventory_kernel.models.book import Book
from inventory_kernel.models.store_book import StoreBook
from inventory_kernel.selectors.base import BaseSelector

DEFAULT_REPORT_LIMIT = 5


@dataclass(frozen=True)
class PricedBookRow:
    """One row of the priciest-books ranking."""

    book_id: int
    name: str
    author: str
    pages: int | None
    price: Decimal
    copies: int

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "author": self.author,
            "pages": self.pages,
            "price": str(self.price),
            "copies": self.copies,
        }


@dataclass(frozen=True)
class ProlificAuthorRow:
    """One row of the prolific-authors ranking."""

    author_id: int
    name: str
    book_count: int
    total_copies: int

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "book_count": self.book_count,
            "total_copies": self.total_copies,
        }


class InventoryReportSelector(BaseSelector):
    """Per-store ranking queries."""

    def top_priciest_books(
        self,
        store_id: int,
        limit: int = DEFAULT_REPORT_LIMIT,
    ) -> list[PricedBookRow]:
        """Most expensive available books in the store, at most ``limit``."""
        if limit < 1:
            return []

        stmt = (
            select(
                Book.id,
                Book.name,
                Author.name,
                Book.pages,
                StoreBook.price,
                StoreBook.copies,
            )
            .select_from(StoreBook)
            .join(Book, StoreBook.book_id == Book.id)
            .join(Author, Book.author_id == Author.id)
            .where(
                StoreBook.store_id == store_id,
                StoreBook.sold_out == False,  # noqa: E712
            )
            .order_by(
                StoreBook.price.desc(),
                StoreBook.created_at.asc(),
                StoreBook.id.asc(),
            )
            .limit(limit)
        )

        return [
            PricedBookRow(
                book_id=book_id,
                name=name,
                author=author_name,
                pages=pages,
                price=Decimal(price),
                copies=copies,
            )
            for book_id, name, author_name, pages, price, copies in self.session.execute(stmt)
        ]

    def top_prolific_authors(
        self,
        store_id: int,
        limit: int = DEFAULT_REPORT_LIMIT,
    ) -> list[ProlificAuthorRow]:
        """Authors with the most distinct available books in the store."""
        if limit < 1:
            return []

        book_count = func.count(func.distinct(StoreBook.book_id)).label("book_count")
        total_copies = func.sum(StoreBook.copies).label("total_copies")

        stmt = (
            select(Author.id, Author.name, book_count, total_copies)
            .select_from(Author)
            .join(Book, Book.author_id == Author.id)
            .join(StoreBook, StoreBook.book_id == Book.id)
            .where(
                StoreBook.store_id == store_id,
                StoreBook.sold_out == False,  # noqa: E712
            )
            .group_by(Author.id, Author.name)
            .order_by(book_count.desc(), total_copies.desc(), Author.name.asc())
            .limit(limit)
        )

        return [
            ProlificAuthorRow(
                author_id=author_id,
                name=name,
                book_count=int(count),
                total_copies=int(copies or 0),
            )
            for author_id, name, count, copies in self.session.execute(stmt)
        ]
