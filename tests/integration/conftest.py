from __future__ import annotations

import os
import uuid
from typing import Iterator

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection
from sqlalchemy.pool import NullPool


@pytest.fixture
def database_url() -> str:
    return os.environ["INTEGRATION_TEST_DATABASE_URL"]


@pytest.fixture
def scratch_connection(database_url: str) -> Iterator[tuple[Connection, str]]:
    """Connection inside a transaction scoped to a throwaway schema.

    PostgreSQL DDL is transactional, so rolling back at the end removes every
    object the test created, including schema renames.
    """
    engine = create_engine(database_url, poolclass=NullPool)
    schema = f"kennel_it_{uuid.uuid4().hex[:12]}"
    with engine.connect() as connection:
        transaction = connection.begin()
        try:
            connection.execute(text(f"CREATE SCHEMA {schema}"))
            connection.execute(text(f"SET LOCAL search_path TO {schema}"))
            yield connection, schema
        finally:
            transaction.rollback()
    engine.dispose()
