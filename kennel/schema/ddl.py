"""DDL operations as data.

Each operation renders to exactly one PostgreSQL statement. Migrations hold
ordered tuples of these instead of emitting SQL imperatively, so the same
record drives online runs, offline SQL output and tests.
"""

from __future__ import annotations

import zlib
from dataclasses import dataclass
from typing import Union


IDENTIFIER_MAX_LENGTH = 30


def generate_identifier_name(columns: list[str], prefix: str = "", max_size: int = IDENTIFIER_MAX_LENGTH) -> str:
    """Derive a stable index name from the table and column names.

    ``columns`` starts with the table name. Each name contributes its CRC32 as
    unpadded lowercase hex; the result is upper-cased and truncated.
    """
    digest = "".join(format(zlib.crc32(name.encode("utf-8")), "x") for name in columns)
    return f"{prefix}_{digest}".upper()[:max_size]


@dataclass(frozen=True)
class Column:
    name: str
    type: str
    nullable: bool = False

    @property
    def sql(self) -> str:
        if self.nullable:
            return f"{self.name} {self.type} DEFAULT NULL"
        return f"{self.name} {self.type} NOT NULL"


def integer(name: str, *, nullable: bool = False) -> Column:
    return Column(name, "INT", nullable)


def varchar(name: str, length: int, *, nullable: bool = False) -> Column:
    return Column(name, f"VARCHAR({length})", nullable)


def text(name: str, *, nullable: bool = False) -> Column:
    return Column(name, "TEXT", nullable)


def json(name: str, *, nullable: bool = False) -> Column:
    return Column(name, "JSON", nullable)


def boolean(name: str, *, nullable: bool = False) -> Column:
    return Column(name, "BOOLEAN", nullable)


def timestamp(name: str, *, precision: int = 0, nullable: bool = False) -> Column:
    return Column(name, f"TIMESTAMP({precision}) WITHOUT TIME ZONE", nullable)


@dataclass(frozen=True)
class CreateSequence:
    name: str
    increment: int = 1
    min_value: int = 1
    start: int = 1

    kind = "create_sequence"

    @property
    def sql(self) -> str:
        return (
            f"CREATE SEQUENCE {self.name} INCREMENT BY {self.increment} "
            f"MINVALUE {self.min_value} START {self.start}"
        )


@dataclass(frozen=True)
class CreateTable:
    name: str
    columns: tuple[Column, ...]
    primary_key: tuple[str, ...] = ("id",)

    kind = "create_table"

    def __post_init__(self) -> None:
        names = [column.name for column in self.columns]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate column in table {self.name}")
        missing = [key for key in self.primary_key if key not in names]
        if missing:
            raise ValueError(f"Primary key columns {missing} not defined on table {self.name}")

    def column(self, name: str) -> Column:
        for column in self.columns:
            if column.name == name:
                return column
        raise KeyError(name)

    @property
    def sql(self) -> str:
        parts = [column.sql for column in self.columns]
        if self.primary_key:
            parts.append(f"PRIMARY KEY({', '.join(self.primary_key)})")
        return f"CREATE TABLE {self.name} ({', '.join(parts)})"


@dataclass(frozen=True)
class CreateIndex:
    table: str
    columns: tuple[str, ...]
    unique: bool = False
    name: str | None = None

    kind = "create_index"

    @property
    def index_name(self) -> str:
        if self.name:
            return self.name
        prefix = "UNIQ" if self.unique else "IDX"
        return generate_identifier_name([self.table, *self.columns], prefix)

    @property
    def sql(self) -> str:
        unique = "UNIQUE " if self.unique else ""
        return f"CREATE {unique}INDEX {self.index_name} ON {self.table} ({', '.join(self.columns)})"


@dataclass(frozen=True)
class CreateSchema:
    name: str

    kind = "create_schema"

    @property
    def sql(self) -> str:
        return f"CREATE SCHEMA {self.name}"


@dataclass(frozen=True)
class DropSequence:
    name: str
    cascade: bool = False

    kind = "drop_sequence"

    @property
    def sql(self) -> str:
        return f"DROP SEQUENCE {self.name}{' CASCADE' if self.cascade else ''}"


@dataclass(frozen=True)
class DropTable:
    name: str

    kind = "drop_table"

    @property
    def sql(self) -> str:
        return f"DROP TABLE {self.name}"


DdlOperation = Union[CreateSequence, CreateTable, CreateIndex, CreateSchema, DropSequence, DropTable]
