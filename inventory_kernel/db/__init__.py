"""Database layer - engine, session management and declarative bases."""

from inventory_kernel.db.base import Base, EntityBase, TrackedBase
from inventory_kernel.db.engine import (
    create_engine_from_url,
    create_tables,
    drop_tables,
    get_engine,
    get_session,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
    session_scope,
)

__all__ = [
    "Base",
    "EntityBase",
    "TrackedBase",
    "create_engine_from_url",
    "create_tables",
    "drop_tables",
    "get_engine",
    "get_session",
    "get_session_factory",
    "init_engine_from_url",
    "reset_engine",
    "session_scope",
]
