from __future__ import annotations

from kennel.migrations.alembic_ops import run_migration
from kennel.schema.migration import Direction
from kennel.schema.registry import get_migration


revision = "20241025110649"
down_revision = None
branch_labels = None
depends_on = None

MIGRATION = get_migration(revision)


def upgrade() -> None:
    run_migration(MIGRATION, Direction.UP)


def downgrade() -> None:
    run_migration(MIGRATION, Direction.DOWN)
