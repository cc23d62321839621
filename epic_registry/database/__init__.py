"""
Epic Registry - Database Module

Provides database connection, session management, and model exports.
"""

from epic_registry.database.models import (
    AuditAction,
    AuditLog,
    Base,
    Case,
    Epic,
    Gender,
    User,
)
from epic_registry.database.connection import (
    drop_db,
    get_engine,
    get_session,
    get_session_factory,
    init_db,
)

__all__ = [
    # Models
    "AuditAction",
    "AuditLog",
    "Base",
    "Case",
    "Epic",
    "Gender",
    "User",
    # Connection
    "drop_db",
    "get_engine",
    "get_session",
    "get_session_factory",
    "init_db",
]
