"""Persistence infrastructure."""

from .database import (
    bootstrap_database,
    create_db_engine,
    create_session_factory,
    init_database,
    session_scope,
)

__all__ = [
    "bootstrap_database",
    "create_db_engine",
    "create_session_factory",
    "init_database",
    "session_scope",
]
