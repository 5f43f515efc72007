from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ErrorDetail:
    code: str
    message: str
    classification: str
    extra: dict[str, Any] | None = None


class AppError(Exception):
    def __init__(
        self,
        code: str,
        message: str,
        classification: str,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.detail = ErrorDetail(
            code=code,
            message=message,
            classification=classification,
            extra=extra,
        )


class MigrationError(AppError):
    def __init__(
        self,
        message: str = "Migration failed",
        *,
        code: str = "migration_failed",
        classification: str = "dependency",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            classification=classification,
            extra=extra,
        )


class SchemaConflictError(MigrationError):
    """An object the migration creates already exists."""

    def __init__(self, message: str = "Schema object already exists", **kwargs: Any) -> None:
        super().__init__(message, code="schema_conflict", classification="schema", **kwargs)


class SchemaNotFoundError(MigrationError):
    """An object the migration drops or alters does not exist."""

    def __init__(self, message: str = "Schema object does not exist", **kwargs: Any) -> None:
        super().__init__(message, code="schema_not_found", classification="schema", **kwargs)


class ConstraintViolationError(MigrationError):
    """A row was rejected by a column or index constraint."""

    def __init__(self, message: str = "Constraint violated", **kwargs: Any) -> None:
        super().__init__(message, code="constraint_violation", classification="client", **kwargs)


class MigrationLockError(MigrationError):
    def __init__(self, message: str = "Migration lock not acquired", **kwargs: Any) -> None:
        super().__init__(message, code="migration_lock_timeout", classification="transient", **kwargs)


class UnknownMigrationError(AppError):
    def __init__(self, version: str) -> None:
        super().__init__(
            code="unknown_migration",
            message=f"Unknown migration version: {version}",
            classification="client",
            extra={"version": version},
        )


class MigrationOrderError(AppError):
    def __init__(self, message: str, extra: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="migration_order",
            message=message,
            classification="config",
            extra=extra,
        )
