"""
Unit tests for Epic Registry repository options and session scoping.
"""

from unittest.mock import MagicMock, Mock

import pytest

from epic_registry.repositories.options import (
    CurrentUser,
    MissingCurrentUserError,
    RepositoryOptions,
    SessionRepository,
    get_current_user,
    get_session,
    require_current_user,
)


class TestOptionHelpers:
    """Tests for session and current-user extraction."""

    def test_none_options(self):
        assert get_session(None) is None
        assert get_current_user(None) is None

    def test_values_are_returned(self):
        session = Mock()
        user = CurrentUser(id="user-1", email="u@example.com")
        options = RepositoryOptions(session=session, current_user=user)

        assert get_session(options) is session
        assert get_current_user(options) is user
        assert require_current_user(options) is user

    def test_any_object_with_id_is_a_user(self):
        user = Mock(id="user-2")

        assert require_current_user(RepositoryOptions(current_user=user)) is user

    @pytest.mark.parametrize(
        "options",
        [None, RepositoryOptions(), RepositoryOptions(current_user=Mock(id=None))],
    )
    def test_missing_user_raises(self, options):
        with pytest.raises(MissingCurrentUserError, match="Current user is required"):
            require_current_user(options)

    def test_missing_user_is_value_error(self):
        assert issubclass(MissingCurrentUserError, ValueError)


class TestSessionScope:
    """Tests for SessionRepository._session_scope."""

    def test_caller_session_is_flushed_not_committed(self):
        """Test that the caller keeps control of its transaction."""
        factory = Mock()
        caller_session = MagicMock()
        repo = SessionRepository(factory)

        with repo._session_scope(RepositoryOptions(session=caller_session)) as session:
            assert session is caller_session

        caller_session.flush.assert_called_once()
        caller_session.commit.assert_not_called()
        caller_session.close.assert_not_called()
        factory.assert_not_called()

    def test_caller_session_error_propagates_without_rollback(self):
        caller_session = MagicMock()
        repo = SessionRepository(Mock())

        with pytest.raises(RuntimeError):
            with repo._session_scope(RepositoryOptions(session=caller_session)):
                raise RuntimeError("boom")

        caller_session.rollback.assert_not_called()
        caller_session.flush.assert_not_called()

    def test_private_session_commits_and_closes(self):
        """Test the unit-of-work lifecycle without a caller session."""
        private_session = MagicMock()
        factory = Mock(return_value=private_session)
        repo = SessionRepository(factory)

        with repo._session_scope(None) as session:
            assert session is private_session

        private_session.commit.assert_called_once()
        private_session.rollback.assert_not_called()
        private_session.close.assert_called_once()

    def test_private_session_rolls_back_on_error(self):
        private_session = MagicMock()
        repo = SessionRepository(Mock(return_value=private_session))

        with pytest.raises(RuntimeError, match="boom"):
            with repo._session_scope(RepositoryOptions()):
                raise RuntimeError("boom")

        private_session.rollback.assert_called_once()
        private_session.commit.assert_not_called()
        private_session.close.assert_called_once()
