"""ORM models for the inventory kernel."""

from inventory_kernel.models.author import Author
from inventory_kernel.models.book import Book
from inventory_kernel.models.store import Store
from inventory_kernel.models.store_book import StoreBook

__all__ = [
    "Author",
    "Book",
    "Store",
    "StoreBook",
]
