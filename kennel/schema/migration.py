from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import text
from sqlalchemy.engine import Connection

from kennel.schema.ddl import DdlOperation
from kennel.utils.run_id import migration_scope


logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"^\d{14}$")


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class Migration:
    """One versioned schema change: ordered forward and backward DDL.

    ``apply`` and ``revert`` run their statements in order on the given
    connection with no local recovery; the first failure propagates and the
    remaining statements are skipped. Transaction handling belongs to the
    caller.
    """

    version: str
    description: str
    up: tuple[DdlOperation, ...]
    down: tuple[DdlOperation, ...]
    transactional: bool = True

    @property
    def up_statements(self) -> list[str]:
        return [operation.sql for operation in self.up]

    @property
    def down_statements(self) -> list[str]:
        return [operation.sql for operation in self.down]

    def statements(self, direction: Direction | str) -> list[str]:
        if Direction(direction) is Direction.UP:
            return self.up_statements
        return self.down_statements

    def apply(self, connection: Connection) -> None:
        self._run(connection, Direction.UP)

    def revert(self, connection: Connection) -> None:
        self._run(connection, Direction.DOWN)

    def _run(self, connection: Connection, direction: Direction) -> None:
        with migration_scope(self.version):
            for index, statement in enumerate(self.statements(direction), start=1):
                logger.info(
                    "migration_statement",
                    extra={"direction": direction.value, "step": index, "sql": statement},
                )
                connection.execute(text(statement))
