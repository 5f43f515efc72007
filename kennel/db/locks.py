from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Callable, Iterator

from sqlalchemy import text
from sqlalchemy.engine import Connection

from kennel.utils.errors import MigrationLockError


logger = logging.getLogger(__name__)


@contextmanager
def advisory_lock(
    connection: Connection,
    key: int,
    *,
    timeout_seconds: float,
    poll_seconds: float = 0.5,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> Iterator[None]:
    """Hold a PostgreSQL session-level advisory lock for the duration of the block.

    Other dialects have no advisory locks; the block runs unlocked there.
    """
    if connection.dialect.name != "postgresql":
        yield
        return

    deadline = clock() + timeout_seconds
    while True:
        acquired = connection.execute(
            text("SELECT pg_try_advisory_lock(:key)"), {"key": key}
        ).scalar()
        if acquired:
            break
        if clock() >= deadline:
            raise MigrationLockError(
                f"Advisory lock {key} not acquired within {timeout_seconds}s",
                extra={"lock_key": key},
            )
        logger.info("migration_lock_wait", extra={"lock_key": key})
        sleep(poll_seconds)

    # The lock is session scoped; commit so the runner starts from a clean transaction.
    if connection.in_transaction():
        connection.commit()
    logger.debug("migration_lock_acquired", extra={"lock_key": key})
    try:
        yield
    except BaseException:
        if connection.in_transaction():
            connection.rollback()
        raise
    else:
        if connection.in_transaction():
            connection.commit()
    finally:
        connection.execute(text("SELECT pg_advisory_unlock(:key)"), {"key": key})
        if connection.in_transaction():
            connection.commit()
        logger.debug("migration_lock_released", extra={"lock_key": key})
