"""Migration commands on top of the Alembic command API.

Database failures surface as the migration error taxonomy from
``kennel.utils.errors``; the raw database message is kept as the error
message and the driver exception is chained.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, TextIO

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.util import CommandError
from sqlalchemy.exc import DBAPIError

from kennel.core.settings import get_settings
from kennel.db.errors import translate_db_error
from kennel.db.session import get_engine
from kennel.schema.migration import Direction
from kennel.schema.registry import MIGRATIONS, get_migration, latest_version, previous_version
from kennel.utils.errors import MigrationOrderError


logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]
ALEMBIC_INI = PROJECT_ROOT / "alembic.ini"

TARGET_ALIASES = {
    "latest": "head",
    "first": "base",
    "prev": "-1",
    "next": "+1",
}


@dataclass(frozen=True)
class MigrationStatus:
    version: str
    description: str
    applied: bool


def build_alembic_config(database_url: str | None = None, *, stdout: TextIO | None = None) -> Config:
    # Offline SQL goes to output_buffer; command messages go to stdout.
    config = Config(str(ALEMBIC_INI), output_buffer=stdout, stdout=stdout or sys.stdout)
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    if database_url:
        # ConfigParser interpolation treats "%" as special.
        config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    config.attributes["configure_logger"] = False
    return config


def _run_alembic(
    action: Callable[..., Any],
    config: Config,
    revision: str,
    *,
    version: str | None = None,
    **kwargs: Any,
) -> None:
    try:
        action(config, revision, **kwargs)
    except CommandError as exc:
        error = MigrationOrderError(str(exc), extra={"revision": revision, "version": version})
        logger.error(
            "migration_failed",
            extra={"code": error.detail.code, "revision": revision, "detail": error.detail.message},
        )
        raise error from exc
    except DBAPIError as exc:
        error = translate_db_error(exc, version=version)
        logger.error(
            "migration_failed",
            extra={"code": error.detail.code, "revision": revision, "detail": error.detail.message},
        )
        raise error from exc


def current(database_url: str | None = None) -> str | None:
    settings = get_settings()
    engine = get_engine(database_url)
    try:
        with engine.connect() as connection:
            context = MigrationContext.configure(
                connection, opts={"version_table": settings.migrations_version_table}
            )
            return context.get_current_revision()
    except DBAPIError as exc:
        raise translate_db_error(exc) from exc


def status(database_url: str | None = None) -> list[MigrationStatus]:
    applied_up_to = current(database_url)
    rows: list[MigrationStatus] = []
    for migration in MIGRATIONS:
        applied = applied_up_to is not None and migration.version <= applied_up_to
        rows.append(MigrationStatus(migration.version, migration.description, applied))
    return rows


def is_up_to_date(database_url: str | None = None) -> bool:
    return current(database_url) == latest_version()


def _resolve_target(target: str, applied: str | None) -> tuple[Direction, str]:
    target = TARGET_ALIASES.get(target, target)
    if target == "0":
        target = "base"
    if target == "base" or target.startswith("-"):
        return Direction.DOWN, target
    if target == "head" or target.startswith("+"):
        return Direction.UP, target
    get_migration(target)
    if applied is not None and target < applied:
        return Direction.DOWN, target
    return Direction.UP, target


def _is_relative(target: str) -> bool:
    target = TARGET_ALIASES.get(target, target)
    return target.startswith(("+", "-"))


def _dry_run_migrate(config: Config, target: str) -> None:
    # Offline: upgrades are rendered from base, downgrades from head.
    direction, revision = _resolve_target(target, None)
    logger.info(
        "migration_run_started",
        extra={"target": revision, "direction": direction.value, "dry_run": True},
    )
    if direction is Direction.UP:
        _run_alembic(command.upgrade, config, revision, sql=True)
    else:
        head = latest_version()
        if head is None:
            logger.info("migration_nothing_to_revert")
            return
        _run_alembic(command.downgrade, config, f"{head}:{revision}", sql=True)
    logger.info("migration_run_finished", extra={"target": revision, "dry_run": True})


def migrate(
    target: str = "head",
    *,
    database_url: str | None = None,
    dry_run: bool = False,
    stdout: TextIO | None = None,
) -> None:
    """Move the schema to ``target``: a version, ``head``/``base`` or a relative step."""
    config = build_alembic_config(database_url, stdout=stdout)
    if dry_run and not _is_relative(target):
        _dry_run_migrate(config, target)
        return

    applied = current(database_url)
    direction, revision = _resolve_target(target, applied)
    logger.info(
        "migration_run_started",
        extra={"target": revision, "direction": direction.value, "from": applied, "dry_run": dry_run},
    )

    if direction is Direction.UP:
        if dry_run and applied is not None:
            revision = f"{applied}:{revision}"
        _run_alembic(command.upgrade, config, revision, sql=dry_run)
    else:
        if dry_run:
            if applied is None:
                logger.info("migration_nothing_to_revert")
                return
            revision = f"{applied}:{revision}"
        _run_alembic(command.downgrade, config, revision, sql=dry_run)

    logger.info("migration_run_finished", extra={"target": revision, "dry_run": dry_run})


def execute(
    version: str,
    direction: Direction | str,
    *,
    database_url: str | None = None,
    dry_run: bool = False,
    stdout: TextIO | None = None,
) -> None:
    """Apply or revert exactly one version."""
    direction = Direction(direction)
    migration = get_migration(version)

    if dry_run:
        out = stdout or sys.stdout
        for statement in migration.statements(direction):
            out.write(f"{statement};\n")
        return

    config = build_alembic_config(database_url, stdout=stdout)
    applied = current(database_url)
    before = previous_version(version)

    if direction is Direction.UP:
        if applied != before:
            raise MigrationOrderError(
                f"Cannot apply {version}: database is at {applied or 'base'}, expected {before or 'base'}",
                extra={"version": version, "current": applied},
            )
        _run_alembic(command.upgrade, config, version, version=version)
    else:
        if applied != version:
            raise MigrationOrderError(
                f"Cannot revert {version}: database is at {applied or 'base'}",
                extra={"version": version, "current": applied},
            )
        _run_alembic(command.downgrade, config, before or "base", version=version)

    logger.info("migration_executed", extra={"version": version, "direction": direction.value})
