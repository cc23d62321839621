"""
Epic Registry - Database Connection Management

Provides engine creation and synchronous session management.
"""

from contextlib import contextmanager
from functools import lru_cache
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from epic_registry.config import get_settings
from epic_registry.database.models import Base


@lru_cache()
def get_engine():
    """
    Get the shared SQLAlchemy engine for synchronous operations.

    Returns:
        SQLAlchemy Engine instance.
    """
    settings = get_settings()
    return create_engine(
        settings.database_url,
        echo=settings.log_level == "DEBUG",
        pool_pre_ping=True,
    )


def get_session_factory(engine=None):
    """
    Get session factory for creating database sessions.

    Entities stay readable after commit so repositories can hand them
    back once their own session is closed.

    Args:
        engine: Engine to bind; defaults to the configured one.

    Returns:
        sessionmaker instance.
    """
    engine = engine or get_engine()
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Automatically handles commit/rollback and session cleanup.

    Yields:
        SQLAlchemy Session instance.

    Example:
        with get_session() as session:
            epics = EpicRepository().find_and_count_all(
                options=RepositoryOptions(session=session)
            )
    """
    SessionLocal = get_session_factory()
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """
    Initialize database tables.

    Creates all tables defined in the models if they don't exist.
    For production, use Alembic migrations instead.
    """
    engine = get_engine()
    Base.metadata.create_all(bind=engine)


def drop_db() -> None:
    """
    Drop all database tables.

    WARNING: This will delete all data. Use only for testing/development.
    """
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
