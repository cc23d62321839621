"""
Test configuration and fixtures
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from epic_registry.database.connection import get_session_factory
from epic_registry.database.models import Base, Case, User
from epic_registry.repositories import (
    AuditLogRepository,
    CurrentUser,
    EpicRepository,
    RepositoryOptions,
)

# In-memory SQLite database shared by every session of a test
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture
def engine():
    """Create a fresh in-memory database for each test."""
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    """Session factory bound to the test database."""
    return get_session_factory(engine)


@pytest.fixture
def current_user(session_factory):
    """Persist an acting user and return its context object."""
    with session_factory() as session:
        user = User(email="tester@example.com", full_name="Test User")
        session.add(user)
        session.commit()
        return CurrentUser(id=user.id, email=user.email)


@pytest.fixture
def case(session_factory):
    """Persist a case epics can be assigned to."""
    with session_factory() as session:
        record = Case(title="Intake review", description="Awaiting assessment")
        session.add(record)
        session.commit()
        return record


@pytest.fixture
def options(current_user):
    """Options carrying only the acting user (no caller session)."""
    return RepositoryOptions(current_user=current_user)


@pytest.fixture
def audit_repo(session_factory):
    return AuditLogRepository(session_factory)


@pytest.fixture
def repo(session_factory, audit_repo):
    return EpicRepository(session_factory, audit_repo)


@pytest.fixture
def make_epic(repo, options):
    """Create an epic through the repository with sensible defaults."""

    def _make(name: str = "Alice Moreau", **fields):
        return repo.create({"name": name, **fields}, options)

    return _make
