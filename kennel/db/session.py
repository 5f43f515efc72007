from __future__ import annotations

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from kennel.core.settings import get_settings


@lru_cache
def _get_engine_cached(database_url: str, pool_size: int, max_overflow: int) -> Engine:
    return create_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
    )


def get_engine(database_url: str | None = None) -> Engine:
    settings = get_settings()
    return _get_engine_cached(
        database_url or settings.database_url,
        settings.db_pool_size,
        settings.db_max_overflow,
    )
