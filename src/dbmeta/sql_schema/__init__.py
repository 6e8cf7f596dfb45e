"""SQL text handling.

Provides the pure, database-free pieces of the tool:
- Decode Firebird catalog type encodings into SQL type syntax
- Split plain DDL scripts into statements
- Split procedure scripts into CREATE OR ALTER PROCEDURE blocks
"""
from __future__ import annotations

from .type_mapper import FieldType, map_type
from .splitter import extract_procedure_blocks, split_sql_statements

__all__ = [
    "FieldType",
    "map_type",
    "split_sql_statements",
    "extract_procedure_blocks",
]
