"""
inventory_ingestion -- Bulk CSV ingestion of bookstore inventory.

Parses and validates uploaded rows on a bounded worker pool, then reconciles
each valid row against stores, authors, books and inventory positions in its
own transaction.

Architecture:
    inventory_ingestion/ sits above inventory_kernel/.  Nothing in the kernel
    imports from ingestion.
"""
