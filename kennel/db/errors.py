"""Translation of raw database errors into the migration error taxonomy.

The translated exception keeps the database's own message; the original
``DBAPIError`` stays reachable as ``__cause__``.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import DBAPIError

from kennel.utils.errors import (
    ConstraintViolationError,
    MigrationError,
    SchemaConflictError,
    SchemaNotFoundError,
)


# duplicate_table covers sequences and indexes as well: they are relations too.
_CONFLICT_STATES = {"42P07", "42P06", "42710"}
_NOT_FOUND_STATES = {"42P01", "42704", "3F000"}
_VALUE_TOO_LONG = "22001"


def sqlstate_of(exc: BaseException) -> str | None:
    orig = getattr(exc, "orig", exc)
    # psycopg 3 exposes ``sqlstate``, psycopg2 exposes ``pgcode``.
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def _raw_message(exc: DBAPIError) -> str:
    orig = exc.orig
    if orig is None:
        return str(exc)
    return str(orig).strip() or str(exc)


def translate_db_error(exc: DBAPIError, *, version: str | None = None) -> MigrationError:
    state = sqlstate_of(exc)
    message = _raw_message(exc)
    extra: dict[str, Any] = {"sqlstate": state}
    if version is not None:
        extra["version"] = version
    if exc.statement:
        extra["statement"] = exc.statement

    if state in _CONFLICT_STATES:
        return SchemaConflictError(message, extra=extra)
    if state in _NOT_FOUND_STATES:
        return SchemaNotFoundError(message, extra=extra)
    if state == _VALUE_TOO_LONG or (state or "").startswith("23"):
        return ConstraintViolationError(message, extra=extra)
    return MigrationError(message, extra=extra)
