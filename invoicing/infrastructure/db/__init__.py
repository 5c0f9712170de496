"""
Database infrastructure for the invoicing engine.
"""

from .database import Base, create_db_engine, create_session_factory, create_all_tables, drop_all_tables

__all__ = [
    "Base",
    "create_db_engine",
    "create_session_factory",
    "create_all_tables",
    "drop_all_tables",
]
