"""
Epic Registry - Audit Log Repository

Append-only audit trail of mutations, written inside the caller's session.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from sqlalchemy import func, select

from epic_registry.database.models import AuditAction, AuditLog
from epic_registry.repositories.options import (
    RepositoryOptions,
    SessionRepository,
    get_current_user,
)
from epic_registry.repositories.query_utils import (
    is_present,
    order_by_clause,
    parse_bound,
    range_bounds,
    to_page_size,
)
from epic_registry.repositories.results import FindAndCountResult

logger = logging.getLogger(__name__)


class AuditLogRepository(SessionRepository):
    """Repository for AuditLog entries."""

    CREATE = AuditAction.CREATE
    UPDATE = AuditAction.UPDATE
    DELETE = AuditAction.DELETE

    def log(
        self,
        entry: Mapping[str, Any],
        options: RepositoryOptions | None = None,
    ) -> AuditLog:
        """
        Record one audit entry.

        Args:
            entry: ``entity_name``, ``entity_id``, ``action`` and ``values``.
            options: Session and acting user of the mutation being audited.

        Returns:
            The persisted AuditLog row.
        """
        current_user = get_current_user(options)

        record = AuditLog(
            entity_name=entry["entity_name"],
            entity_id=str(entry["entity_id"]),
            action=AuditAction(entry["action"]),
            values=entry.get("values"),
            created_by_id=getattr(current_user, "id", None),
            created_by_email=getattr(current_user, "email", None),
            timestamp=datetime.now(timezone.utc),
        )

        with self._session_scope(options) as session:
            session.add(record)

        logger.debug(
            f"Audit {record.action.value} {record.entity_name}:{record.entity_id}"
        )
        return record

    def find_and_count_all(
        self,
        filter: Mapping[str, Any] | None = None,
        limit: Any = 0,
        offset: Any = 0,
        order_by: str | None = None,
        options: RepositoryOptions | None = None,
    ) -> FindAndCountResult:
        """
        Find audit entries with paging and the total count.

        Args:
            filter: Optional ``entity_name``, ``entity_id``, ``action`` and
                ``timestamp_range`` ([start, end], each side optional).
            limit: Page size; falsy means unbounded.
            offset: Rows to skip; falsy means none.
            order_by: ``field_ASC``/``field_DESC``; defaults to newest first.
            options: Session context.

        Returns:
            Matching rows for the page and the unpaged count.
        """
        criteria = []
        filter = filter or {}

        if filter.get("entity_name"):
            criteria.append(AuditLog.entity_name == filter["entity_name"])

        if filter.get("entity_id"):
            criteria.append(AuditLog.entity_id == str(filter["entity_id"]))

        if filter.get("action"):
            criteria.append(AuditLog.action == AuditAction(filter["action"]))

        if filter.get("timestamp_range"):
            start, end = range_bounds(filter["timestamp_range"])
            if is_present(start):
                criteria.append(AuditLog.timestamp >= parse_bound(start, "datetime"))
            if is_present(end):
                criteria.append(AuditLog.timestamp <= parse_bound(end, "datetime"))

        stmt = (
            select(AuditLog)
            .where(*criteria)
            .order_by(order_by_clause(AuditLog, order_by or "timestamp_DESC"))
            .offset(to_page_size(offset))
            .limit(to_page_size(limit))
        )
        count_stmt = select(func.count()).select_from(AuditLog).where(*criteria)

        with self._session_scope(options) as session:
            rows = list(session.scalars(stmt).all())
            count = session.scalar(count_stmt) or 0

        return FindAndCountResult(rows=rows, count=count)
