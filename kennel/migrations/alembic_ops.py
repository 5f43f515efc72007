"""Glue between registry migrations and Alembic revision scripts."""

from __future__ import annotations

from contextlib import nullcontext

from alembic import context, op

from kennel.schema.migration import Direction, Migration


def run_migration(migration: Migration, direction: Direction) -> None:
    # Offline mode has no connection; Alembic renders op.execute calls as SQL.
    if context.is_offline_mode():
        for statement in migration.statements(direction):
            op.execute(statement)
        return

    block = nullcontext() if migration.transactional else op.get_context().autocommit_block()
    with block:
        connection = op.get_bind()
        if direction is Direction.UP:
            migration.apply(connection)
        else:
            migration.revert(connection)
