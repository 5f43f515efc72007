from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from kennel.core.settings import get_settings
from kennel.db.locks import advisory_lock

config = context.config
# kennel.migrations.commands configures JSON logging itself and opts out here.
if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name, disable_existing_loggers=False)

# Schema lives in kennel.schema as raw DDL; there is no ORM metadata to diff.
target_metadata = None


def get_url() -> str:
    configured = config.get_main_option("sqlalchemy.url")
    if configured:
        return configured
    return get_settings().database_url


def run_migrations_offline() -> None:
    settings = get_settings()
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        version_table=settings.migrations_version_table,
        transaction_per_migration=settings.migrations_transaction_per_migration,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    settings = get_settings()
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_url()
    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        with advisory_lock(
            connection,
            settings.migrations_lock_key,
            timeout_seconds=settings.migrations_lock_timeout_seconds,
            poll_seconds=settings.migrations_lock_poll_seconds,
        ):
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                version_table=settings.migrations_version_table,
                transaction_per_migration=settings.migrations_transaction_per_migration,
            )
            with context.begin_transaction():
                context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
