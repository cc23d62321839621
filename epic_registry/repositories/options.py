"""
Epic Registry - Repository Options

Request-scoped context threaded through every repository call: the caller's
active session (if it is running a larger unit of work) and the acting user.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Generator

from sqlalchemy.orm import Session

from epic_registry.database.connection import get_session_factory


class MissingCurrentUserError(ValueError):
    """Raised when an operation needs an acting user and none was supplied."""


@dataclass(frozen=True)
class CurrentUser:
    """The user on whose behalf a repository call is made."""

    id: str
    email: str | None = None


@dataclass(frozen=True)
class RepositoryOptions:
    """Session and acting user for a repository call."""

    session: Session | None = None
    current_user: Any = None


def get_session(options: RepositoryOptions | None) -> Session | None:
    """Return the caller's active session, if any."""
    if options is None:
        return None
    return options.session


def get_current_user(options: RepositoryOptions | None) -> Any:
    """Return the acting user, if any."""
    if options is None:
        return None
    return options.current_user


def require_current_user(options: RepositoryOptions | None) -> Any:
    """
    Return the acting user.

    Raises:
        MissingCurrentUserError: If no user with an id was supplied.
    """
    user = get_current_user(options)
    if user is None or getattr(user, "id", None) is None:
        raise MissingCurrentUserError("Current user is required for this operation")
    return user


class SessionRepository:
    """Base class for repositories that honour a caller-supplied session."""

    def __init__(self, session_factory: Callable[[], Session] | None = None) -> None:
        """
        Initialize repository with a session factory.

        Args:
            session_factory: Callable returning new sessions. Defaults to
                the factory bound to the configured engine.
        """
        self._session_factory = session_factory or get_session_factory()

    @contextmanager
    def _session_scope(
        self, options: RepositoryOptions | None
    ) -> Generator[Session, None, None]:
        """
        Yield the session a store call must run in.

        The caller's session is used as-is and only flushed; commit and
        rollback stay with the caller. Otherwise a private session is opened,
        committed on success, rolled back on error and closed.
        """
        session = get_session(options)
        if session is not None:
            yield session
            session.flush()
            return

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
