"""Create app_user and dog with their id sequences."""

from __future__ import annotations

from kennel.schema import ddl
from kennel.schema.migration import Migration


APP_USER = ddl.CreateTable(
    "app_user",
    (
        ddl.integer("id"),
        ddl.varchar("email", 180),
        ddl.json("roles"),
        ddl.varchar("password", 255),
        ddl.boolean("is_verified"),
        ddl.varchar("verification_token", 255, nullable=True),
    ),
)

DOG = ddl.CreateTable(
    "dog",
    (
        ddl.integer("id"),
        ddl.varchar("name", 100),
        ddl.integer("age"),
        ddl.text("description"),
        ddl.varchar("image_url", 255),
        ddl.timestamp("updated_at", nullable=True),
        ddl.timestamp("created_at"),
    ),
)


MIGRATION = Migration(
    version="20241025110649",
    description="Create app_user and dog tables with id sequences",
    up=(
        ddl.CreateSequence("app_user_id_seq"),
        ddl.CreateSequence("dog_id_seq"),
        APP_USER,
        ddl.CreateIndex("app_user", ("email",), unique=True),
        DOG,
    ),
    down=(
        # Generated rollback recreates "public" instead of dropping anything.
        # Kept as generated: on a database that already has "public" the
        # rollback fails before any drop runs.
        ddl.CreateSchema("public"),
        ddl.DropSequence("app_user_id_seq", cascade=True),
        ddl.DropSequence("dog_id_seq", cascade=True),
        ddl.DropTable("app_user"),
        ddl.DropTable("dog"),
    ),
)
