"""
Unit tests for Epic Registry AuditLogRepository.
"""

from datetime import datetime, timedelta, timezone

import pytest

from epic_registry.database.models import AuditAction
from epic_registry.repositories import AuditLogRepository, CurrentUser, RepositoryOptions


class TestLog:
    """Tests for writing audit entries."""

    def test_log_stamps_user_and_time(self, audit_repo, options, current_user):
        """Test that an entry records the acting user and a timestamp."""
        before = datetime.now(timezone.utc)

        record = audit_repo.log(
            {
                "entity_name": "Epic",
                "entity_id": "epic-1",
                "action": AuditLogRepository.UPDATE,
                "values": {"name": "Renamed"},
            },
            options,
        )

        assert record.id
        assert record.action == AuditAction.UPDATE
        assert record.created_by_id == current_user.id
        assert record.created_by_email == current_user.email
        assert record.timestamp >= before

        stored = audit_repo.find_and_count_all({"entity_id": "epic-1"}).rows[0]
        assert stored.values == {"name": "Renamed"}

    def test_log_without_user(self, audit_repo):
        """Test that the audit sink does not require an acting user."""
        record = audit_repo.log(
            {"entity_name": "Epic", "entity_id": "epic-2", "action": "DELETE", "values": None}
        )

        assert record.action == AuditAction.DELETE
        assert record.created_by_id is None

    def test_unknown_action_raises(self, audit_repo):
        with pytest.raises(ValueError):
            audit_repo.log({"entity_name": "Epic", "entity_id": "x", "action": "PURGE"})

    def test_log_uses_caller_session(self, audit_repo, session_factory):
        """Test that a rolled-back caller session discards the entry."""
        session = session_factory()
        audit_repo.log(
            {"entity_name": "Epic", "entity_id": "epic-3", "action": "CREATE", "values": {}},
            RepositoryOptions(session=session, current_user=CurrentUser(id="u")),
        )
        session.rollback()
        session.close()

        assert audit_repo.find_and_count_all({"entity_id": "epic-3"}).count == 0


class TestFindAndCountAll:
    """Tests for querying the audit trail."""

    @pytest.fixture
    def entries(self, audit_repo, session_factory):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        specs = [
            ("Epic", "e1", AuditAction.CREATE),
            ("Epic", "e1", AuditAction.DELETE),
            ("Epic", "e2", AuditAction.DELETE),
            ("Case", "c1", AuditAction.CREATE),
        ]
        records = []
        for entity_name, entity_id, action in specs:
            record = audit_repo.log(
                {"entity_name": entity_name, "entity_id": entity_id, "action": action}
            )
            records.append(record)

        # Spread timestamps one day apart for range filtering
        with session_factory() as session:
            for offset, record in enumerate(records):
                session.merge(record).timestamp = base + timedelta(days=offset)
            session.commit()
        return records

    def test_filters(self, audit_repo, entries):
        assert audit_repo.find_and_count_all({"entity_name": "Epic"}).count == 3
        assert audit_repo.find_and_count_all({"entity_id": "e1"}).count == 2
        assert audit_repo.find_and_count_all({"action": "DELETE"}).count == 2
        assert (
            audit_repo.find_and_count_all({"entity_name": "Epic", "action": "CREATE"}).count
            == 1
        )

    def test_timestamp_range(self, audit_repo, entries):
        result = audit_repo.find_and_count_all(
            {"timestamp_range": ["2024-01-02T00:00:00Z", "2024-01-03T00:00:00Z"]}
        )

        assert result.count == 2
        assert [r.entity_id for r in result.rows] == ["e2", "e1"]

    def test_timestamp_range_single_element_is_start_only(self, audit_repo, entries):
        result = audit_repo.find_and_count_all({"timestamp_range": ["2024-01-03T00:00:00Z"]})

        assert result.count == 2
        assert [r.entity_id for r in result.rows] == ["c1", "e2"]

    def test_default_order_and_paging(self, audit_repo, entries):
        result = audit_repo.find_and_count_all(limit=2)

        assert result.count == 4
        assert [r.entity_id for r in result.rows] == ["c1", "e2"]

        oldest = audit_repo.find_and_count_all(order_by="timestamp_ASC", limit=1)
        assert oldest.rows[0].entity_id == "e1"
        assert oldest.rows[0].action == AuditAction.CREATE
