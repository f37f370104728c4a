"""Tests for StoreSelector."""

import pytest

from inventory_kernel.exceptions import StoreNotFoundError
from inventory_kernel.models import Store
from inventory_kernel.selectors import StoreSelector


@pytest.fixture
def stores(session, clock):
    rows = [
        Store(name="Zebra Books", address="9 Z St", created_at=clock.now(), updated_at=clock.now()),
        Store(name="Alpha Books", logo="http://x/logo.png", created_at=clock.now(), updated_at=clock.now()),
    ]
    session.add_all(rows)
    session.flush()
    return rows


class TestStoreSelector:
    def test_get_store(self, session, stores):
        summary = StoreSelector(session).get_store(stores[0].id)
        assert summary.name == "Zebra Books"
        assert summary.address == "9 Z St"
        assert summary.logo is None

    def test_get_missing_store(self, session):
        with pytest.raises(StoreNotFoundError) as exc_info:
            StoreSelector(session).get_store(404)
        assert str(exc_info.value) == "Store with ID 404 not found."
        assert exc_info.value.code == "STORE_NOT_FOUND"

    def test_list_stores_ordered_by_name(self, session, stores):
        names = [s.name for s in StoreSelector(session).list_stores()]
        assert names == ["Alpha Books", "Zebra Books"]

    def test_find_by_name(self, session, stores):
        selector = StoreSelector(session)
        assert selector.find_by_name("Alpha Books").logo == "http://x/logo.png"
        assert selector.find_by_name("Nope") is None

    def test_to_dict(self, session, stores):
        payload = StoreSelector(session).get_store(stores[1].id).to_dict()
        assert payload["id"] == stores[1].id
        assert payload["name"] == "Alpha Books"
        assert payload["created_at"] is not None
