"""Read user schema objects from the Firebird system catalog.

Reads go through a RowSource (anything with query_rows), so the reader runs
the same against a live FirebirdSession or against fixture rows in tests.
Extracted objects:
- Domains (RDB$FIELDS)
- Tables and their columns (RDB$RELATIONS, RDB$RELATION_FIELDS)
- Procedures and their parameters (RDB$PROCEDURES, RDB$PROCEDURE_PARAMETERS)
"""
from __future__ import annotations

import logging
from typing import Any

from dbmeta.db.protocols import RowSource
from dbmeta.sql_schema.type_mapper import FieldType
from .models import (
    Column,
    Domain,
    ParameterDirection,
    Procedure,
    ProcedureParameter,
    Table,
    resolve_type_source,
)

logger = logging.getLogger(__name__)


DOMAINS_SQL = """
    SELECT
        TRIM(RDB$FIELD_NAME) AS NAME,
        RDB$FIELD_TYPE,
        RDB$FIELD_SUB_TYPE,
        RDB$FIELD_LENGTH,
        RDB$CHARACTER_LENGTH,
        RDB$FIELD_PRECISION,
        RDB$FIELD_SCALE,
        RDB$NULL_FLAG
    FROM RDB$FIELDS
    WHERE COALESCE(RDB$SYSTEM_FLAG, 0) = 0
    ORDER BY RDB$FIELD_NAME
"""

TABLES_SQL = """
    SELECT TRIM(RDB$RELATION_NAME) AS NAME
    FROM RDB$RELATIONS
    WHERE COALESCE(RDB$SYSTEM_FLAG, 0) = 0
      AND (RDB$VIEW_BLR IS NULL OR RDB$VIEW_BLR = '')
    ORDER BY RDB$RELATION_NAME
"""

COLUMNS_SQL = """
    SELECT
        TRIM(rf.RDB$FIELD_NAME) AS COL_NAME,
        TRIM(rf.RDB$FIELD_SOURCE) AS FIELD_SOURCE,
        rf.RDB$FIELD_POSITION AS POSITION,
        f.RDB$FIELD_TYPE,
        f.RDB$FIELD_SUB_TYPE,
        f.RDB$FIELD_LENGTH,
        f.RDB$CHARACTER_LENGTH,
        f.RDB$FIELD_PRECISION,
        f.RDB$FIELD_SCALE,
        rf.RDB$NULL_FLAG,
        COALESCE(f.RDB$SYSTEM_FLAG, 0) AS SYS_FLAG
    FROM RDB$RELATION_FIELDS rf
    JOIN RDB$FIELDS f ON f.RDB$FIELD_NAME = rf.RDB$FIELD_SOURCE
    WHERE rf.RDB$RELATION_NAME = ?
    ORDER BY rf.RDB$FIELD_POSITION
"""

PROCEDURES_SQL = """
    SELECT
        TRIM(RDB$PROCEDURE_NAME) AS NAME,
        RDB$PROCEDURE_SOURCE AS SRC
    FROM RDB$PROCEDURES
    WHERE COALESCE(RDB$SYSTEM_FLAG, 0) = 0
    ORDER BY RDB$PROCEDURE_NAME
"""

PARAMETERS_SQL = """
    SELECT
        TRIM(pp.RDB$PARAMETER_NAME) AS PARAM_NAME,
        pp.RDB$PARAMETER_TYPE AS PARAM_TYPE,
        pp.RDB$PARAMETER_NUMBER AS PARAM_NO,
        TRIM(pp.RDB$FIELD_SOURCE) AS FIELD_SOURCE,
        f.RDB$FIELD_TYPE,
        f.RDB$FIELD_SUB_TYPE,
        f.RDB$FIELD_LENGTH,
        f.RDB$CHARACTER_LENGTH,
        f.RDB$FIELD_PRECISION,
        f.RDB$FIELD_SCALE,
        COALESCE(f.RDB$SYSTEM_FLAG, 0) AS SYS_FLAG
    FROM RDB$PROCEDURE_PARAMETERS pp
    JOIN RDB$FIELDS f ON f.RDB$FIELD_NAME = pp.RDB$FIELD_SOURCE
    WHERE pp.RDB$PROCEDURE_NAME = ?
    ORDER BY pp.RDB$PARAMETER_TYPE, pp.RDB$PARAMETER_NUMBER
"""


def _name(row: dict[str, Any], key: str = "NAME") -> str:
    return (row[key] or "").strip()


def read_domains(source: RowSource) -> list[Domain]:
    """Read user domains ordered by name.

    NOT NULL is set when the null flag is present at all, whatever its value.
    """
    domains = [
        Domain(
            name=_name(row),
            field_type=FieldType.from_row(row),
            not_null=row.get("RDB$NULL_FLAG") is not None,
        )
        for row in source.query_rows(DOMAINS_SQL)
    ]
    logger.debug(f"Read {len(domains)} domains")
    return domains


def read_columns(source: RowSource, table_name: str) -> list[Column]:
    """Read a table's columns in declared order."""
    return [
        Column(
            name=_name(row, "COL_NAME"),
            type_source=resolve_type_source(row),
            not_null=row.get("RDB$NULL_FLAG") is not None,
            position=int(row.get("POSITION") or 0),
        )
        for row in source.query_rows(COLUMNS_SQL, (table_name,))
    ]


def read_tables(source: RowSource) -> list[Table]:
    """Read user tables (views excluded) with their columns."""
    table_names = [_name(row) for row in source.query_rows(TABLES_SQL)]

    tables = []
    for table_name in table_names:
        tables.append(Table(name=table_name, columns=read_columns(source, table_name)))

    logger.debug(f"Read {len(tables)} tables")
    return tables


def read_parameters(
    source: RowSource,
    procedure_name: str
) -> tuple[list[ProcedureParameter], list[ProcedureParameter]]:
    """Read a procedure's parameters.

    Returns:
        Tuple of (inputs, outputs), each in declared order
    """
    inputs = []
    outputs = []

    for row in source.query_rows(PARAMETERS_SQL, (procedure_name,)):
        direction = ParameterDirection.IN if int(row.get("PARAM_TYPE") or 0) == 0 else ParameterDirection.OUT
        param = ProcedureParameter(
            name=_name(row, "PARAM_NAME"),
            direction=direction,
            type_source=resolve_type_source(row),
            position=int(row.get("PARAM_NO") or 0),
        )
        if direction == ParameterDirection.IN:
            inputs.append(param)
        else:
            outputs.append(param)

    return inputs, outputs


def read_procedures(source: RowSource) -> list[Procedure]:
    """Read user procedures ordered by name.

    Parameters are only fetched for procedures that have stored source;
    the others are exported as placeholders.
    """
    procedures = []

    for row in source.query_rows(PROCEDURES_SQL):
        procedure = Procedure(name=_name(row), source=row.get("SRC"))
        if procedure.has_source:
            procedure.inputs, procedure.outputs = read_parameters(source, procedure.name)
        else:
            logger.warning(f"Procedure {procedure.name} has no stored source")
        procedures.append(procedure)

    logger.debug(f"Read {len(procedures)} procedures")
    return procedures
