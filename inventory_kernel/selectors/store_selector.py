"""
Module: inventory_kernel.selectors.store_selector
Responsibility: Read-only lookup and listing of stores.
Architecture position: Kernel > Selectors.
"""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select

from inventory_kernel.exceptions import StoreNotFoundError
from inventory_kernel.models.store import Store
from inventory_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class StoreSummary:
    """Store details as exposed to callers and report renderers."""

    store_id: int
    name: str
    address: str | None
    logo: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, store: Store) -> "StoreSummary":
        return cls(
            store_id=store.id,
            name=store.name,
            address=store.address,
            logo=store.logo,
            created_at=store.created_at,
            updated_at=store.updated_at,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.store_id,
            "name": self.name,
            "address": self.address,
            "logo": self.logo,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class StoreSelector(BaseSelector):
    """Store queries."""

    def get_store(self, store_id: int) -> StoreSummary:
        """
        Fetch one store.

        Raises:
            StoreNotFoundError: If no store has this id.
        """
        store = self.session.get(Store, store_id)
        if store is None:
            raise StoreNotFoundError(store_id)
        return StoreSummary.from_model(store)

    def find_by_name(self, name: str) -> StoreSummary | None:
        store = self.session.scalars(
            select(Store).where(Store.name == name)
        ).first()
        return StoreSummary.from_model(store) if store else None

    def list_stores(self) -> list[StoreSummary]:
        """All stores ordered by name."""
        stores = self.session.scalars(select(Store).order_by(Store.name.asc()))
        return [StoreSummary.from_model(s) for s in stores]
