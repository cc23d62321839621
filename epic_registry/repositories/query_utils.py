"""
Epic Registry - Query Utilities

Helpers shared by repositories to turn API-level input into SQLAlchemy criteria.
"""

import re
from datetime import date, datetime
from typing import Any, Literal
from uuid import UUID, uuid4

from sqlalchemy import inspect
from sqlalchemy.sql.elements import UnaryExpression

LIKE_ESCAPE_CHAR = "\\"

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def normalize_id(value: Any) -> str:
    """
    Convert an external id into the stored id encoding.

    A value that is not a valid UUID becomes a fresh random UUID, so a lookup
    with it matches nothing instead of failing.

    Args:
        value: Id as received from the API layer.

    Returns:
        Canonical UUID string.
    """
    try:
        return str(UUID(str(value).strip()))
    except (TypeError, ValueError, AttributeError):
        return str(uuid4())


def escape_like(value: str) -> str:
    """
    Escape LIKE wildcards so the value is matched literally.

    Args:
        value: Free-text search input.

    Returns:
        Value with the escape character, ``%`` and ``_`` escaped.
    """
    return (
        str(value)
        .replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", f"{LIKE_ESCAPE_CHAR}%")
        .replace("_", f"{LIKE_ESCAPE_CHAR}_")
    )


def contains_pattern(value: str) -> str:
    """Build a LIKE pattern matching the literal value anywhere in a column."""
    return f"%{escape_like(value)}%"


def _attribute_name(field: str) -> str:
    """createdAt -> created_at"""
    return _CAMEL_BOUNDARY.sub("_", field).lower()


def order_by_clause(model, order_by: str | None) -> UnaryExpression | None:
    """
    Translate ``field_ASC`` / ``field_DESC`` into an ORDER BY clause.

    Args:
        model: Mapped class the field belongs to.
        order_by: Sort directive, e.g. ``createdAt_DESC`` or ``name_ASC``.

    Returns:
        Clause for ``select().order_by()``, or None if no directive was given.

    Raises:
        ValueError: If the field is not a column of the model or the
            direction is neither ASC nor DESC.
    """
    if not order_by:
        return None

    field, _, direction = order_by.rpartition("_")
    direction = direction.upper()
    if not field or direction not in ("ASC", "DESC"):
        raise ValueError(
            f"Invalid orderBy: {order_by}. Expected <field>_ASC or <field>_DESC"
        )

    columns = inspect(model).columns
    name = _attribute_name(field)
    if name not in columns:
        raise ValueError(f"Invalid orderBy field for {model.__name__}: {field}")

    column = getattr(model, name)
    return column.asc() if direction == "ASC" else column.desc()


def to_page_size(value: Any) -> int | None:
    """
    Coerce a limit/offset into a positive int.

    Zero, empty, negative and non-numeric values mean "unbounded" for a
    limit and "no skip" for an offset, so they all become None.
    """
    if not value:
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def is_present(value: Any) -> bool:
    """True unless the value is None or an empty string."""
    return value is not None and value != ""


def parse_bound(value: Any, kind: Literal["date", "datetime"]) -> Any:
    """
    Parse one side of a range filter.

    Args:
        value: date/datetime instance or ISO-8601 string.
        kind: Column type the bound is compared with.

    Returns:
        Parsed bound, or None if the bound is absent.

    Raises:
        ValueError: If a string bound is not ISO-8601.
    """
    if not is_present(value):
        return None
    if isinstance(value, datetime):
        return value.date() if kind == "date" else value
    if isinstance(value, date):
        return value if kind == "date" else datetime.combine(value, datetime.min.time())
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = f"{text[:-1]}+00:00"
        if kind == "date":
            return date.fromisoformat(text[:10])
        return datetime.fromisoformat(text)
    raise ValueError(f"Unsupported range bound: {value!r}")


def lookup_id(value: Any) -> str:
    """
    Id used for primary-key lookups and deletes.

    Valid UUIDs are canonicalized like ``normalize_id``; anything else is
    kept as given so it simply matches nothing.
    """
    try:
        return str(UUID(str(value).strip()))
    except (TypeError, ValueError, AttributeError):
        return str(value)


def range_bounds(value: Any) -> tuple[Any, Any]:
    """
    Split a ``[start, end]`` range filter.

    Missing trailing elements count as absent, so ``[start]`` is start-only.
    """
    if value is None:
        return None, None
    bounds = list(value) + [None, None]
    return bounds[0], bounds[1]
