"""Render catalog objects as DDL script lines.

Each export_* function returns the lines of one script file. A list element
may itself span several lines (procedure headers and bodies).
"""
from __future__ import annotations

from dbmeta.db.protocols import RowSource
from dbmeta.sql_schema.type_mapper import map_type
from .catalog_reader import read_domains, read_procedures, read_tables
from .models import Domain, Procedure, ProcedureParameter, Table, render_type_source

INDENT = "    "
MISSING_SOURCE_COMMENT = "-- procedure source not available"


def _not_null(flag: bool) -> str:
    return " NOT NULL" if flag else ""


def _indented_list(items: list[str]) -> list[str]:
    """Indent items one per line, comma after all but the last."""
    return [
        f"{INDENT}{item}{',' if i < len(items) - 1 else ''}"
        for i, item in enumerate(items)
    ]


def render_domain(domain: Domain) -> str:
    return f"CREATE DOMAIN {domain.name} AS {map_type(domain.field_type)}{_not_null(domain.not_null)};"


def render_domains(domains: list[Domain]) -> list[str]:
    lines = ["-- DOMAINS"]
    lines.extend(render_domain(d) for d in domains)
    return lines


def render_table(table: Table) -> list[str]:
    """CREATE TABLE statement for one table, one line per column."""
    columns = [
        f"{col.name} {render_type_source(col.type_source)}{_not_null(col.not_null)}"
        for col in table.columns
    ]
    return [
        f"CREATE TABLE {table.name} (",
        *_indented_list(columns),
        ");",
    ]


def render_tables(tables: list[Table]) -> list[str]:
    lines = ["-- TABLES"]
    for table in tables:
        lines.append("")
        lines.append(f"-- Table: {table.name}")
        lines.extend(render_table(table))
    return lines


def _parameter_defs(params: list[ProcedureParameter]) -> list[str]:
    return [f"{p.name} {render_type_source(p.type_source)}" for p in params]


def render_procedure_header(procedure: Procedure) -> str:
    """CREATE OR ALTER PROCEDURE header up to and including AS.

    Example:
        CREATE OR ALTER PROCEDURE GET_TOTAL (
            ORDER_ID INTEGER
        )
        RETURNS (
            TOTAL NUMERIC(15, 2)
        )
        AS
    """
    lines = []

    if procedure.inputs:
        lines.append(f"CREATE OR ALTER PROCEDURE {procedure.name} (")
        lines.extend(_indented_list(_parameter_defs(procedure.inputs)))
        lines.append(")")
    else:
        lines.append(f"CREATE OR ALTER PROCEDURE {procedure.name}")

    if procedure.outputs:
        lines.append("RETURNS (")
        lines.extend(_indented_list(_parameter_defs(procedure.outputs)))
        lines.append(")")

    lines.append("AS")
    return "\n".join(lines)


def render_procedures(procedures: list[Procedure]) -> list[str]:
    """Procedure script lines.

    Procedures without stored source become a comment placeholder, never an
    empty CREATE statement.
    """
    lines = ["-- PROCEDURES"]
    for procedure in procedures:
        lines.append("")
        lines.append(f"-- Procedure: {procedure.name}")

        if not procedure.has_source:
            lines.append(MISSING_SOURCE_COMMENT)
            continue

        lines.append(render_procedure_header(procedure))
        lines.append(procedure.source.strip())
    return lines


def export_domains(source: RowSource) -> list[str]:
    return render_domains(read_domains(source))


def export_tables(source: RowSource) -> list[str]:
    return render_tables(read_tables(source))


def export_procedures(source: RowSource) -> list[str]:
    return render_procedures(read_procedures(source))
