from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator


_run_id: ContextVar[str] = ContextVar("run_id", default="")
_migration_version: ContextVar[str | None] = ContextVar("migration_version", default=None)


def set_run_id(value: str | None = None) -> str:
    run_id = value or uuid.uuid4().hex
    _run_id.set(run_id)
    return run_id


def get_run_id() -> str:
    return _run_id.get()


def get_migration_version() -> str | None:
    return _migration_version.get()


@contextmanager
def migration_scope(version: str) -> Iterator[None]:
    """Tag every log record emitted inside the block with ``version``."""
    token = _migration_version.set(version)
    try:
        yield
    finally:
        _migration_version.reset(token)
