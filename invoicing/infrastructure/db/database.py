"""
Database configuration and session management.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool


# Create declarative base
Base = declarative_base()


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create a SQLAlchemy engine.
    In-memory SQLite databases share one connection so every session sees the same tables.
    """
    if database_url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **options)
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create the Session class bound to an engine."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def create_all_tables(engine: Engine) -> None:
    """Create every table known to the declarative base."""
    # Import models so they register with Base.metadata
    from invoicing.infrastructure.db import models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def drop_all_tables(engine: Engine) -> None:
    from invoicing.infrastructure.db import models  # noqa: F401
    Base.metadata.drop_all(bind=engine)

