"""
Inventory Kernel

Persistence core for the bookstore inventory system:
- Stores, authors, books and per-store inventory positions
- Typed, code-carrying exceptions
- Structured JSON logging
- Read-only ranking selectors for store reports
"""

__version__ = "0.1.0"
