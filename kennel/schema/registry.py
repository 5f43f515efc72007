"""Ordered list of every schema migration.

Order here is the apply order. Each entry has an Alembic revision of the same
version under ``alembic/versions``.
"""

from __future__ import annotations

from typing import Iterable

from kennel.schema.migration import VERSION_PATTERN, Migration
from kennel.schema.versions import v20241025110649
from kennel.utils.errors import MigrationOrderError, UnknownMigrationError


def validate_migrations(migrations: Iterable[Migration]) -> tuple[Migration, ...]:
    ordered = tuple(migrations)
    previous: str | None = None
    for migration in ordered:
        if not VERSION_PATTERN.match(migration.version):
            raise MigrationOrderError(
                f"Malformed migration version: {migration.version}",
                extra={"version": migration.version},
            )
        if previous is not None and migration.version == previous:
            raise MigrationOrderError(
                f"Duplicate migration version: {migration.version}",
                extra={"version": migration.version},
            )
        if previous is not None and migration.version < previous:
            raise MigrationOrderError(
                f"Migration {migration.version} is listed after {previous}",
                extra={"version": migration.version, "previous": previous},
            )
        previous = migration.version
    return ordered


MIGRATIONS: tuple[Migration, ...] = validate_migrations(
    [
        v20241025110649.MIGRATION,
    ]
)


def get_migration(version: str, migrations: Iterable[Migration] = MIGRATIONS) -> Migration:
    for migration in migrations:
        if migration.version == version:
            return migration
    raise UnknownMigrationError(version)


def previous_version(version: str, migrations: Iterable[Migration] = MIGRATIONS) -> str | None:
    ordered = list(migrations)
    for index, migration in enumerate(ordered):
        if migration.version == version:
            return ordered[index - 1].version if index > 0 else None
    raise UnknownMigrationError(version)


def latest_version(migrations: Iterable[Migration] = MIGRATIONS) -> str | None:
    ordered = list(migrations)
    return ordered[-1].version if ordered else None
