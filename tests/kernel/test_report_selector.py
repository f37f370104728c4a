"""
Tests for InventoryReportSelector: priciest books and prolific authors.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from inventory_kernel.models import Author, Book, Store, StoreBook
from inventory_kernel.selectors import (
    InventoryReportSelector,
    PricedBookRow,
    ProlificAuthorRow,
)


class _Seeder:
    """Insert rows directly with explicit timestamps."""

    def __init__(self, session, clock):
        self.session = session
        self.clock = clock
        self._authors: dict[str, Author] = {}

    def store(self, name="BookWorld") -> Store:
        store = Store(name=name, created_at=self.clock.now(), updated_at=self.clock.now())
        self.session.add(store)
        self.session.flush()
        return store

    def stock(self, store, book, price, created_offset=0):
        stamp = self.clock.now() + timedelta(seconds=created_offset)
        self.session.add(
            StoreBook(
                store_id=store.id,
                book_id=book.id,
                price=Decimal(price),
                created_at=stamp,
                updated_at=stamp,
            )
        )
        self.session.flush()

    def position(self, store, book_name, author_name, price, copies=1, sold_out=False, pages=None, created_offset=0):
        author = self._authors.get(author_name)
        if author is None:
            author = Author(name=author_name, created_at=self.clock.now(), updated_at=self.clock.now())
            self.session.add(author)
            self.session.flush()
            self._authors[author_name] = author
        book = Book(
            name=book_name,
            pages=pages,
            author_id=author.id,
            created_at=self.clock.now(),
            updated_at=self.clock.now(),
        )
        self.session.add(book)
        self.session.flush()
        stamp = self.clock.now() + timedelta(seconds=created_offset)
        self.session.add(
            StoreBook(
                store_id=store.id,
                book_id=book.id,
                price=Decimal(price),
                copies=copies,
                sold_out=sold_out,
                created_at=stamp,
                updated_at=stamp,
            )
        )
        self.session.flush()
        return book


@pytest.fixture
def seed(session, clock):
    return _Seeder(session, clock)


@pytest.fixture
def selector(session):
    return InventoryReportSelector(session)


class TestTopPriciestBooks:
    def test_excludes_sold_out_and_orders_by_price(self, seed, selector):
        store = seed.store()
        seed.position(store, "Cheap", "A", "9.99", created_offset=1)
        seed.position(store, "First25", "B", "25.00", pages=300, created_offset=2)
        seed.position(store, "Second25", "C", "25.00", created_offset=3)
        seed.position(store, "Gone", "D", "3.50", sold_out=True, created_offset=4)

        rows = selector.top_priciest_books(store.id)

        assert [r.name for r in rows] == ["First25", "Second25", "Cheap"]
        assert rows[0] == PricedBookRow(
            book_id=rows[0].book_id,
            name="First25",
            author="B",
            pages=300,
            price=Decimal("25.00"),
            copies=1,
        )
        assert isinstance(rows[0].price, Decimal)

    def test_ties_follow_insertion_time_not_id(self, seed, selector):
        store = seed.store()
        seed.position(store, "Later", "A", "25.00", created_offset=10)
        seed.position(store, "Earlier", "B", "25.00", created_offset=5)
        assert [r.name for r in selector.top_priciest_books(store.id)] == ["Earlier", "Later"]

    def test_equal_timestamps_keep_stocking_order(self, seed, selector):
        store = seed.store()
        seed.position(store, "One", "A", "10")
        seed.position(store, "Two", "B", "10")
        assert [r.name for r in selector.top_priciest_books(store.id)] == ["One", "Two"]

    def test_equal_timestamps_follow_position_not_book(self, seed, selector):
        first_store, second_store = seed.store("First"), seed.store("Second")
        older = seed.position(first_store, "Older", "A", "1")
        newer = seed.position(first_store, "Newer", "B", "1")
        assert older.id < newer.id

        seed.stock(second_store, newer, "10")
        seed.stock(second_store, older, "10")

        assert [r.name for r in selector.top_priciest_books(second_store.id)] == ["Newer", "Older"]

    def test_limit(self, seed, selector):
        store = seed.store()
        for i in range(7):
            seed.position(store, f"B{i}", "A", str(10 + i))
        rows = selector.top_priciest_books(store.id)
        assert len(rows) == 5
        assert rows[0].price == Decimal("16")
        assert len(selector.top_priciest_books(store.id, limit=2)) == 2
        assert selector.top_priciest_books(store.id, limit=0) == []

    def test_only_this_store(self, seed, selector):
        mine, other = seed.store("Mine"), seed.store("Other")
        seed.position(other, "Elsewhere", "A", "99")
        seed.position(mine, "Here", "B", "1")
        assert [r.name for r in selector.top_priciest_books(mine.id)] == ["Here"]

    def test_empty_store(self, seed, selector):
        assert selector.top_priciest_books(seed.store().id) == []


class TestTopProlificAuthors:
    def test_book_count_tie_broken_by_copies(self, seed, selector):
        store = seed.store()
        seed.position(store, "A1", "Author A", "10", copies=1)
        seed.position(store, "A2", "Author A", "10", copies=2)
        seed.position(store, "B1", "Author B", "10", copies=2)
        seed.position(store, "B2", "Author B", "10", copies=3)

        rows = selector.top_prolific_authors(store.id)

        assert [(r.name, r.book_count, r.total_copies) for r in rows] == [
            ("Author B", 2, 5),
            ("Author A", 2, 3),
        ]
        assert isinstance(rows[0], ProlificAuthorRow)

    def test_more_books_beats_more_copies(self, seed, selector):
        store = seed.store()
        seed.position(store, "X1", "Many", "1", copies=1)
        seed.position(store, "X2", "Many", "1", copies=1)
        seed.position(store, "Y1", "Few", "1", copies=50)
        assert [r.name for r in selector.top_prolific_authors(store.id)] == ["Many", "Few"]

    def test_full_tie_ordered_by_name(self, seed, selector):
        store = seed.store()
        seed.position(store, "Z", "Zed", "1")
        seed.position(store, "A", "Abe", "1")
        assert [r.name for r in selector.top_prolific_authors(store.id)] == ["Abe", "Zed"]

    def test_sold_out_positions_not_counted(self, seed, selector):
        store = seed.store()
        seed.position(store, "Live", "A", "1", copies=2)
        seed.position(store, "Gone", "A", "1", copies=7, sold_out=True)
        seed.position(store, "AllGone", "B", "1", sold_out=True)
        rows = selector.top_prolific_authors(store.id)
        assert [(r.name, r.book_count, r.total_copies) for r in rows] == [("A", 1, 2)]

    def test_limit(self, seed, selector):
        store = seed.store()
        for i in range(6):
            seed.position(store, f"Book{i}", f"Author{i}", "1")
        assert len(selector.top_prolific_authors(store.id)) == 5
        assert len(selector.top_prolific_authors(store.id, limit=3)) == 3
