"""Catalog objects read from a live database."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Mapping, Union

from dbmeta.sql_schema.type_mapper import FieldType, map_type


@dataclass(frozen=True)
class DomainRef:
    """A column or parameter declared with a user domain."""
    name: str


# Either a reference to a user domain or an inline primitive type
TypeSource = Union[DomainRef, FieldType]


class ParameterDirection(IntEnum):
    """RDB$PARAMETER_TYPE values."""
    IN = 0
    OUT = 1


@dataclass
class Domain:
    name: str
    field_type: FieldType
    not_null: bool = False


@dataclass
class Column:
    name: str
    type_source: TypeSource
    not_null: bool = False
    position: int = 0


@dataclass
class Table:
    name: str
    columns: list[Column] = field(default_factory=list)


@dataclass
class ProcedureParameter:
    name: str
    direction: ParameterDirection
    type_source: TypeSource
    position: int = 0


@dataclass
class Procedure:
    name: str
    source: str | None = None
    inputs: list[ProcedureParameter] = field(default_factory=list)
    outputs: list[ProcedureParameter] = field(default_factory=list)

    @property
    def has_source(self) -> bool:
        return bool(self.source and self.source.strip())


def resolve_type_source(row: Mapping[str, Any]) -> TypeSource:
    """Decide whether a column/parameter row uses a domain or a primitive type.

    The row must carry FIELD_SOURCE, SYS_FLAG and the RDB$FIELDS type
    columns. Field definitions with a zero system flag are user domains.
    """
    if int(row.get("SYS_FLAG") or 0) == 0:
        return DomainRef(name=(row["FIELD_SOURCE"] or "").strip())
    return FieldType.from_row(row)


def render_type_source(type_source: TypeSource) -> str:
    """SQL type text for a column or parameter."""
    if isinstance(type_source, DomainRef):
        return type_source.name
    return map_type(type_source)
