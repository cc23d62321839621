"""
Epic Registry - Repository Layer

Provides data access abstractions for Epics and their audit trail.
"""

from epic_registry.repositories.audit_log_repository import AuditLogRepository
from epic_registry.repositories.epic_repository import (
    EpicFilter,
    EpicQuery,
    EpicRepository,
)
from epic_registry.repositories.options import (
    CurrentUser,
    MissingCurrentUserError,
    RepositoryOptions,
)
from epic_registry.repositories.results import AutocompleteOption, FindAndCountResult

__all__ = [
    "AuditLogRepository",
    "AutocompleteOption",
    "CurrentUser",
    "EpicFilter",
    "EpicQuery",
    "EpicRepository",
    "FindAndCountResult",
    "MissingCurrentUserError",
    "RepositoryOptions",
]
