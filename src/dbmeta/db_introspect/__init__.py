"""Catalog introspection and DDL generation for Firebird databases."""
from __future__ import annotations

from .models import (
    Column,
    Domain,
    DomainRef,
    ParameterDirection,
    Procedure,
    ProcedureParameter,
    Table,
    TypeSource,
    render_type_source,
    resolve_type_source,
)
from .catalog_reader import read_domains, read_procedures, read_tables
from .ddl_generator import (
    export_domains,
    export_procedures,
    export_tables,
    render_domains,
    render_procedures,
    render_tables,
)
from .exporter import ExportResult, export_scripts

__all__ = [
    # Models
    "Column",
    "Domain",
    "DomainRef",
    "ParameterDirection",
    "Procedure",
    "ProcedureParameter",
    "Table",
    "TypeSource",
    "render_type_source",
    "resolve_type_source",
    # Catalog reads
    "read_domains",
    "read_tables",
    "read_procedures",
    # DDL rendering
    "render_domains",
    "render_tables",
    "render_procedures",
    "export_domains",
    "export_tables",
    "export_procedures",
    # Export
    "ExportResult",
    "export_scripts",
]
