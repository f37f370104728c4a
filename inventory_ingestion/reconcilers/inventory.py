"""
Inventory reconciler: NormalizedRow -> Store, Author, Book, StoreBook.

Entities are found by natural key and created on first reference, always in
the order Store -> Author -> Book -> StoreBook so that concurrent rows take
row locks in the same order.  Finds use SELECT ... FOR UPDATE where the
dialect supports it.

Each create runs inside a SAVEPOINT.  An IntegrityError on create means a
concurrent transaction inserted the same natural key first: the savepoint
is rolled back and the find re-run, and the existing entity is used.

Existing stores take a new address or logo only when the row supplies a
non-empty value that differs; blank values never clear stored ones.
Existing books take a differing page count.  An existing inventory position
is restocked: one more copy, latest price, sold_out cleared.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from inventory_kernel.domain.clock import Clock
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.author import Author
from inventory_kernel.models.book import Book
from inventory_kernel.models.store import Store
from inventory_kernel.models.store_book import StoreBook

from inventory_ingestion.domain.types import NormalizedRow
from inventory_ingestion.domain.validators import parse_price
from inventory_ingestion.reconcilers.base import ReconcileResult

logger = get_logger("ingestion.reconciler")

T = TypeVar("T")


def _find(session: Session, stmt: Select) -> Any:
    return session.scalars(stmt.with_for_update()).first()


def _find_or_create(
    session: Session,
    stmt: Select,
    factory: Callable[[], T],
) -> tuple[T, bool]:
    """Return (entity, created).  Creates inside a SAVEPOINT."""
    existing = _find(session, stmt)
    if existing is not None:
        return existing, False

    savepoint = session.begin_nested()
    try:
        entity = factory()
        session.add(entity)
        session.flush()
    except IntegrityError:
        savepoint.rollback()
        existing = _find(session, stmt)
        if existing is None:
            raise
        logger.debug(
            "create_race_resolved",
            extra={"entity_type": type(existing).__name__},
        )
        return existing, False
    savepoint.commit()
    return entity, True


class InventoryReconciler:
    """Applies one inventory row. Entity order: store, author, book, position."""

    def reconcile(
        self,
        row: NormalizedRow,
        session: Session,
        clock: Clock,
    ) -> ReconcileResult:
        now = clock.now()

        # 1. Store
        store, store_created = _find_or_create(
            session,
            select(Store).where(Store.name == row.store_name),
            lambda: Store(
                name=row.store_name,
                address=row.store_address,
                logo=row.logo,
                created_at=now,
                updated_at=now,
            ),
        )
        store_updated = False
        if not store_created:
            if row.store_address and row.store_address != store.address:
                store.address = row.store_address
                store_updated = True
            if row.logo and row.logo != store.logo:
                store.logo = row.logo
                store_updated = True

        # 2. Author
        author, author_created = _find_or_create(
            session,
            select(Author).where(Author.name == row.author_name),
            lambda: Author(name=row.author_name, created_at=now, updated_at=now),
        )

        # 3. Book
        book, book_created = _find_or_create(
            session,
            select(Book).where(Book.name == row.book_name, Book.author_id == author.id),
            lambda: Book(
                name=row.book_name,
                pages=row.pages,
                author_id=author.id,
                created_at=now,
                updated_at=now,
            ),
        )
        book_updated = False
        if not book_created and row.pages is not None and row.pages != book.pages:
            book.pages = row.pages
            book_updated = True

        # 4. Price guard; the whole row is discarded by the caller's rollback
        price = parse_price(row.price)

        # 5. Inventory position
        position, inventory_created = _find_or_create(
            session,
            select(StoreBook).where(
                StoreBook.store_id == store.id,
                StoreBook.book_id == book.id,
            ),
            lambda: StoreBook(
                store_id=store.id,
                book_id=book.id,
                price=price,
                copies=1,
                sold_out=False,
                created_at=now,
                updated_at=now,
            ),
        )
        if not inventory_created:
            position.restock(price)

        session.flush()

        return ReconcileResult(
            success=True,
            store_id=store.id,
            book_id=book.id,
            store_created=store_created,
            store_updated=store_updated,
            author_created=author_created,
            book_created=book_created,
            book_updated=book_updated,
            inventory_created=inventory_created,
            inventory_updated=not inventory_created,
        )
