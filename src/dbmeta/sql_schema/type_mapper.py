"""Firebird field type decoding.

Translates the numeric type encoding stored in RDB$FIELDS into the SQL type
syntax used in CREATE DOMAIN / CREATE TABLE / procedure parameter lists.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


# RDB$FIELD_TYPE codes
SMALLINT = 7
INTEGER = 8
FLOAT = 10
DATE = 12
TIME = 13
CHAR = 14
INT64 = 16
DOUBLE = 27
TIMESTAMP = 35
VARCHAR = 37

# RDB$FIELD_SUB_TYPE values for INT64 fields
SUBTYPE_NUMERIC = 1
SUBTYPE_DECIMAL = 2

_SIMPLE_TYPES = {
    SMALLINT: "SMALLINT",
    INTEGER: "INTEGER",
    FLOAT: "FLOAT",
    DATE: "DATE",
    TIME: "TIME",
    DOUBLE: "DOUBLE PRECISION",
    TIMESTAMP: "TIMESTAMP",
}


@dataclass(frozen=True)
class FieldType:
    """Catalog encoding of a scalar type."""
    type_code: int
    sub_type: int = 0
    length: int = 0
    character_length: int = 0
    precision: int = 0
    scale: int = 0  # stored negative by the engine

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> FieldType:
        """Build from a catalog row selecting the RDB$FIELDS type columns.

        NULL columns are read as 0.
        """
        return cls(
            type_code=_int(row.get("RDB$FIELD_TYPE")),
            sub_type=_int(row.get("RDB$FIELD_SUB_TYPE")),
            length=_int(row.get("RDB$FIELD_LENGTH")),
            character_length=_int(row.get("RDB$CHARACTER_LENGTH")),
            precision=_int(row.get("RDB$FIELD_PRECISION")),
            scale=_int(row.get("RDB$FIELD_SCALE")),
        )


def _int(value: Any) -> int:
    return 0 if value is None else int(value)


def map_type(field_type: FieldType) -> str:
    """Map a catalog type encoding to its DDL type fragment.

    Unknown type codes (blobs, arrays, newer engine types) fall back to
    BLOB so that an export never stops on an unmapped column.

    Args:
        field_type: Decoded RDB$FIELDS type columns

    Returns:
        SQL type, e.g. "VARCHAR(50)" or "NUMERIC(9, 2)"
    """
    code = field_type.type_code

    if code in _SIMPLE_TYPES:
        return _SIMPLE_TYPES[code]

    if code in (CHAR, VARCHAR):
        size = field_type.character_length if field_type.character_length > 0 else field_type.length
        name = "CHAR" if code == CHAR else "VARCHAR"
        return f"{name}({size})"

    if code == INT64:
        scale = abs(field_type.scale)
        if field_type.sub_type == SUBTYPE_NUMERIC:
            return f"NUMERIC({field_type.precision}, {scale})"
        if field_type.sub_type == SUBTYPE_DECIMAL:
            return f"DECIMAL({field_type.precision}, {scale})"
        return "BIGINT"

    return "BLOB"
