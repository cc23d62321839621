"""
Epic Registry - Epic Repository

Create, delete, count, lookup, filtered listing and autocomplete for Epic
entities. Deletions are recorded in the audit log.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

from sqlalchemy import delete, func, or_, select
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.elements import ColumnElement

from epic_registry.database.models import AuditAction, Epic
from epic_registry.repositories.audit_log_repository import AuditLogRepository
from epic_registry.repositories.options import (
    RepositoryOptions,
    SessionRepository,
    get_session,
    require_current_user,
)
from epic_registry.repositories.query_utils import (
    LIKE_ESCAPE_CHAR,
    contains_pattern,
    is_present,
    lookup_id,
    normalize_id,
    order_by_clause,
    parse_bound,
    range_bounds,
    to_page_size,
)
from epic_registry.repositories.results import AutocompleteOption, FindAndCountResult

logger = logging.getLogger(__name__)

DEFAULT_ORDER_BY = "createdAt_DESC"
AUTOCOMPLETE_ORDER_BY = "name_ASC"


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


@dataclass
class EpicFilter:
    """Structured, field-level filter accepted by find_and_count_all."""

    id: str | None = None
    name: str | None = None
    birthdate_range: Sequence[Any] | None = None
    gender: str | None = None
    phone: str | None = None
    created_at_range: Sequence[Any] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "EpicFilter":
        """Build a filter from API input (camelCase or snake_case keys)."""
        data = data or {}
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            birthdate_range=_pick(data, "birthdateRange", "birthdate_range"),
            gender=data.get("gender"),
            phone=data.get("phone"),
            created_at_range=_pick(data, "createdAtRange", "created_at_range"),
        )


@dataclass
class EpicQuery:
    """Filter, paging and ordering for find_and_count_all."""

    filter: EpicFilter = field(default_factory=EpicFilter)
    limit: Any = 0
    offset: Any = 0
    order_by: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "EpicQuery":
        """Build a query from API input (``orderBy`` or ``order_by``)."""
        data = data or {}
        raw_filter = data.get("filter")
        return cls(
            filter=(
                raw_filter
                if isinstance(raw_filter, EpicFilter)
                else EpicFilter.from_dict(raw_filter)
            ),
            limit=data.get("limit", 0),
            offset=data.get("offset", 0),
            order_by=_pick(data, "orderBy", "order_by"),
        )


class EpicRepository(SessionRepository):
    """Repository for Epic entity operations."""

    ENTITY_NAME = "Epic"

    def __init__(self, session_factory=None, audit_log_repository=None) -> None:
        """
        Initialize repository.

        Args:
            session_factory: Callable returning new sessions, used when the
                caller does not supply one.
            audit_log_repository: Audit sink; defaults to one sharing the
                same session factory.
        """
        super().__init__(session_factory)
        self.audit_log_repository = audit_log_repository or AuditLogRepository(
            self._session_factory
        )

    def create(
        self,
        data: Mapping[str, Any],
        options: RepositoryOptions | None = None,
    ) -> Epic:
        """
        Create an epic stamped with the acting user.

        Args:
            data: Field values keyed by model attribute name.
            options: Session and acting user. The acting user is required.

        Returns:
            The epic freshly read back with ``assign_case`` loaded.

        Raises:
            MissingCurrentUserError: If no acting user was supplied.
        """
        current_user = require_current_user(options)

        with self._session_scope(options) as session:
            if get_session(options) is not None:
                Epic.__table__.create(bind=session.connection(), checkfirst=True)

            record = Epic(
                **{
                    **data,
                    "created_by_id": current_user.id,
                    "updated_by_id": current_user.id,
                }
            )
            session.add(record)

        logger.info(f"Created epic: {record.id}")
        return self.find_by_id(record.id, options)

    def destroy(self, id: str, options: RepositoryOptions | None = None) -> None:
        """
        Delete an epic and record the deletion.

        A missing id is not an error; the audit entry is written either way.

        Args:
            id: Id of the epic.
            options: Session and acting user.
        """
        with self._session_scope(options) as session:
            session.execute(delete(Epic).where(Epic.id == lookup_id(id)))

        self._create_audit_log(AuditLogRepository.DELETE, id, None, options)
        logger.info(f"Deleted epic: {id}")

    def count(
        self,
        criteria: ColumnElement[bool] | Iterable[ColumnElement[bool]] | None = None,
        options: RepositoryOptions | None = None,
    ) -> int:
        """
        Count epics matching raw SQLAlchemy criteria.

        Args:
            criteria: A boolean clause or clauses (AND-ed), e.g.
                ``Epic.gender == Gender.FEMALE``. None counts everything.
            options: Session context.

        Returns:
            Number of matching epics.
        """
        if criteria is None:
            clauses = []
        elif isinstance(criteria, ColumnElement):
            clauses = [criteria]
        else:
            clauses = list(criteria)

        stmt = select(func.count()).select_from(Epic).where(*clauses)
        with self._session_scope(options) as session:
            return session.scalar(stmt) or 0

    def find_by_id(
        self, id: str, options: RepositoryOptions | None = None
    ) -> Epic | None:
        """
        Get epic by ID with its assigned case.

        Args:
            id: Id of the epic.
            options: Session context.

        Returns:
            Epic instance or None if not found.
        """
        stmt = (
            select(Epic)
            .options(selectinload(Epic.assign_case))
            .where(Epic.id == lookup_id(id))
        )
        with self._session_scope(options) as session:
            return session.scalars(stmt).first()

    def _build_criteria(self, filter: EpicFilter) -> list[ColumnElement[bool]]:
        criteria: list[ColumnElement[bool]] = []

        if filter.id:
            criteria.append(Epic.id == normalize_id(filter.id))

        if filter.name:
            criteria.append(
                Epic.name.ilike(contains_pattern(filter.name), escape=LIKE_ESCAPE_CHAR)
            )

        if filter.birthdate_range:
            start, end = range_bounds(filter.birthdate_range)
            if is_present(start):
                criteria.append(Epic.birthdate >= parse_bound(start, "date"))
            if is_present(end):
                criteria.append(Epic.birthdate <= parse_bound(end, "date"))

        if filter.gender:
            criteria.append(Epic.gender == filter.gender)

        if filter.phone:
            criteria.append(
                Epic.phone.ilike(contains_pattern(filter.phone), escape=LIKE_ESCAPE_CHAR)
            )

        if filter.created_at_range:
            start, end = range_bounds(filter.created_at_range)
            if is_present(start):
                criteria.append(Epic.created_at >= parse_bound(start, "datetime"))
            if is_present(end):
                criteria.append(Epic.created_at <= parse_bound(end, "datetime"))

        return criteria

    def find_and_count_all(
        self,
        query: EpicQuery | Mapping[str, Any] | None = None,
        options: RepositoryOptions | None = None,
    ) -> FindAndCountResult:
        """
        Find a page of epics and count the full matching set.

        Args:
            query: Filter, limit, offset and orderBy. A falsy limit or offset
                means unbounded / no skip. Ordering defaults to newest first.
            options: Session context. The page and the count share a
                snapshot only if the caller supplied a session.

        Returns:
            Page rows with ``assign_case`` loaded, and the unpaged count.
        """
        if not isinstance(query, EpicQuery):
            query = EpicQuery.from_dict(query)

        criteria = self._build_criteria(query.filter)

        stmt = (
            select(Epic)
            .options(selectinload(Epic.assign_case))
            .where(*criteria)
            .order_by(order_by_clause(Epic, query.order_by or DEFAULT_ORDER_BY))
            .offset(to_page_size(query.offset))
            .limit(to_page_size(query.limit))
        )

        with self._session_scope(options) as session:
            rows = list(session.scalars(stmt).all())

        count = self.count(criteria, options)
        logger.debug(f"Listed {len(rows)} of {count} epics")
        return FindAndCountResult(rows=rows, count=count)

    def find_all_autocomplete(
        self,
        search: str | None,
        limit: Any = 0,
        options: RepositoryOptions | None = None,
    ) -> list[AutocompleteOption]:
        """
        List epics for autocomplete suggestions, sorted by name.

        Args:
            search: Exact id or case-insensitive name fragment. Empty
                matches every epic.
            limit: Maximum number of suggestions; falsy means unbounded.
            options: Session context.

        Returns:
            ``AutocompleteOption(id, label)`` entries, label being the name.
        """
        criteria = []
        if search:
            criteria.append(
                or_(
                    Epic.id == normalize_id(search),
                    Epic.name.ilike(contains_pattern(search), escape=LIKE_ESCAPE_CHAR),
                )
            )

        stmt = (
            select(Epic)
            .where(*criteria)
            .order_by(order_by_clause(Epic, AUTOCOMPLETE_ORDER_BY))
            .limit(to_page_size(limit))
        )

        with self._session_scope(options) as session:
            records = session.scalars(stmt).all()
            return [AutocompleteOption(id=record.id, label=record.name) for record in records]

    def _create_audit_log(
        self,
        action: AuditAction,
        id: str,
        data: Mapping[str, Any] | None,
        options: RepositoryOptions | None = None,
    ) -> None:
        """
        Write an audit entry for this entity.

        Args:
            action: CREATE, UPDATE or DELETE.
            id: Id of the epic.
            data: New values, or None for a deletion.
            options: Session and acting user.
        """
        self.audit_log_repository.log(
            {
                "entity_name": self.ENTITY_NAME,
                "entity_id": id,
                "action": action,
                "values": data,
            },
            options,
        )
