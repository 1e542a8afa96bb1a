"""
Database session management for the Tarefas system.

Provides SQLAlchemy engine and session factory construction for the
task store. SQLite URLs get a thread-shareable connection so the store
can run its work in the request threadpool.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


def create_db_engine(db_url: str, echo: bool = False) -> Engine:
    """
    Create a SQLAlchemy engine for the given URL.

    Args:
        db_url: SQLAlchemy database URL
        echo: Log SQL statements (debug mode)

    Returns:
        Engine: Configured SQLAlchemy engine
    """
    if db_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            # In-memory databases live in a single shared connection
            kwargs["poolclass"] = StaticPool
        return create_engine(db_url, echo=echo, **kwargs)

    return create_engine(
        db_url,
        pool_pre_ping=True,  # Enable connection health checks
        pool_size=10,
        max_overflow=20,
        echo=echo,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to ``engine``."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )

