"""Tests for catalog introspection and DDL generation.

Tests cover:
- Domain, table and procedure reads from fixture catalog rows
- Domain vs primitive type resolution
- DDL rendering
- Script export and round trip through the splitter
"""
import json

import pytest

from dbmeta.db_introspect.catalog_reader import (
    COLUMNS_SQL,
    DOMAINS_SQL,
    PARAMETERS_SQL,
    PROCEDURES_SQL,
    TABLES_SQL,
    read_procedures,
    read_tables,
)
from dbmeta.db_introspect.ddl_generator import (
    MISSING_SOURCE_COMMENT,
    export_domains,
    export_procedures,
    export_tables,
)
from dbmeta.db_introspect.exporter import export_scripts
from dbmeta.db_introspect.models import DomainRef, ParameterDirection, resolve_type_source
from dbmeta.sql_schema.splitter import extract_procedure_blocks, split_sql_statements
from dbmeta.sql_schema.type_mapper import FieldType

from conftest import FakeCatalog


def _type_cols(code, sub_type=None, length=None, char_length=None, precision=None, scale=None):
    return {
        "RDB$FIELD_TYPE": code,
        "RDB$FIELD_SUB_TYPE": sub_type,
        "RDB$FIELD_LENGTH": length,
        "RDB$CHARACTER_LENGTH": char_length,
        "RDB$FIELD_PRECISION": precision,
        "RDB$FIELD_SCALE": scale,
    }


def _column(name, source, sys_flag, position, not_null=False, **type_cols):
    return {
        "COL_NAME": name,
        "FIELD_SOURCE": source,
        "POSITION": position,
        "RDB$NULL_FLAG": 1 if not_null else None,
        "SYS_FLAG": sys_flag,
        **type_cols,
    }


def _param(name, direction, number, source, sys_flag, **type_cols):
    return {
        "PARAM_NAME": name,
        "PARAM_TYPE": direction,
        "PARAM_NO": number,
        "FIELD_SOURCE": source,
        "SYS_FLAG": sys_flag,
        **type_cols,
    }


GET_TOTAL_SOURCE = """
BEGIN
  SELECT SUM(AMOUNT) FROM ORDERS WHERE CUSTOMER_ID = :CUSTOMER_ID INTO :TOTAL;
  SUSPEND;
END
"""


@pytest.fixture
def catalog():
    """Small schema: two domains, two tables, three procedures."""
    return FakeCatalog({
        DOMAINS_SQL: [
            {"NAME": "D_ID", **_type_cols(8, length=4), "RDB$NULL_FLAG": 1},
            {"NAME": "D_NAME", **_type_cols(37, length=200, char_length=50), "RDB$NULL_FLAG": None},
        ],
        TABLES_SQL: [
            {"NAME": "CUSTOMER"},
            {"NAME": "ORDERS"},
        ],
        COLUMNS_SQL: {
            "CUSTOMER": [
                _column("ID", "D_ID", 0, 0, **_type_cols(8, length=4)),
                _column("NAME", "D_NAME", 0, 1, not_null=True, **_type_cols(37, length=200, char_length=50)),
                _column("CREATED_AT", "RDB$3", 1, 2, **_type_cols(35, length=8)),
            ],
            "ORDERS": [
                _column("ID", "D_ID", 0, 0, **_type_cols(8, length=4)),
                _column("CUSTOMER_ID", "D_ID", 0, 1, **_type_cols(8, length=4)),
                _column("AMOUNT", "RDB$7", 1, 2, not_null=True,
                        **_type_cols(16, sub_type=1, length=8, precision=15, scale=-2)),
            ],
        },
        PROCEDURES_SQL: [
            {"NAME": "GET_TOTAL", "SRC": GET_TOTAL_SOURCE},
            {"NAME": "LEGACY_PROC", "SRC": None},
            {"NAME": "PING", "SRC": "BEGIN\n  SUSPEND;\nEND"},
        ],
        PARAMETERS_SQL: {
            "GET_TOTAL": [
                _param("CUSTOMER_ID", 0, 0, "D_ID", 0, **_type_cols(8, length=4)),
                _param("TOTAL", 1, 0, "RDB$9", 1, **_type_cols(16, sub_type=1, length=8, precision=15, scale=-2)),
            ],
            "PING": [
                _param("PONG", 1, 0, "RDB$10", 1, **_type_cols(7, length=2)),
            ],
        },
    })


# =============================================================================
# Type Resolution Tests
# =============================================================================

class TestResolveTypeSource:
    """Test domain vs primitive resolution."""

    def test_user_field_is_domain(self):
        """Should reference the domain when the field has system flag 0."""
        row = {"FIELD_SOURCE": "D_ID", "SYS_FLAG": 0, **_type_cols(8)}
        assert resolve_type_source(row) == DomainRef("D_ID")

    def test_system_field_is_primitive(self):
        """Should decode the type when the field is not a user domain."""
        row = {"FIELD_SOURCE": "RDB$1", "SYS_FLAG": 1, **_type_cols(37, length=40)}
        assert resolve_type_source(row) == FieldType(type_code=37, length=40)


# =============================================================================
# Read Tests
# =============================================================================

class TestCatalogReads:
    """Test reading catalog rows into objects."""

    def test_columns_keep_declared_order(self, catalog):
        """Should keep columns in position order per table."""
        tables = read_tables(catalog)

        assert [t.name for t in tables] == ["CUSTOMER", "ORDERS"]
        assert [c.name for c in tables[0].columns] == ["ID", "NAME", "CREATED_AT"]
        assert tables[0].columns[1].not_null is True

    def test_procedure_parameters_split_by_direction(self, catalog):
        """Should group parameters into inputs and outputs."""
        procedures = {p.name: p for p in read_procedures(catalog)}

        get_total = procedures["GET_TOTAL"]
        assert [p.name for p in get_total.inputs] == ["CUSTOMER_ID"]
        assert [p.name for p in get_total.outputs] == ["TOTAL"]
        assert get_total.outputs[0].direction == ParameterDirection.OUT

    def test_no_parameter_query_for_missing_source(self, catalog):
        """Should not look up parameters of procedures without source."""
        read_procedures(catalog)

        param_lookups = [params for sql, params in catalog.queries if sql == PARAMETERS_SQL]
        assert ("LEGACY_PROC",) not in param_lookups
        assert ("GET_TOTAL",) in param_lookups


# =============================================================================
# DDL Rendering Tests
# =============================================================================

class TestExportDomains:
    """Test CREATE DOMAIN generation."""

    def test_domains(self, catalog):
        """Should emit one CREATE DOMAIN per row after the header."""
        assert export_domains(catalog) == [
            "-- DOMAINS",
            "CREATE DOMAIN D_ID AS INTEGER NOT NULL;",
            "CREATE DOMAIN D_NAME AS VARCHAR(50);",
        ]

    def test_null_flag_presence_means_not_null(self):
        """Should treat any non-null flag value as NOT NULL."""
        catalog = FakeCatalog({DOMAINS_SQL: [{"NAME": "D_FLAG", **_type_cols(7), "RDB$NULL_FLAG": 0}]})
        assert export_domains(catalog)[1] == "CREATE DOMAIN D_FLAG AS SMALLINT NOT NULL;"

    def test_empty_catalog(self):
        """Should emit only the header."""
        assert export_domains(FakeCatalog({})) == ["-- DOMAINS"]


class TestExportTables:
    """Test CREATE TABLE generation."""

    def test_tables(self, catalog):
        """Should render domain names and mapped primitive types."""
        assert export_tables(catalog) == [
            "-- TABLES",
            "",
            "-- Table: CUSTOMER",
            "CREATE TABLE CUSTOMER (",
            "    ID D_ID,",
            "    NAME D_NAME NOT NULL,",
            "    CREATED_AT TIMESTAMP",
            ");",
            "",
            "-- Table: ORDERS",
            "CREATE TABLE ORDERS (",
            "    ID D_ID,",
            "    CUSTOMER_ID D_ID,",
            "    AMOUNT NUMERIC(15, 2) NOT NULL",
            ");",
        ]


class TestExportProcedures:
    """Test CREATE OR ALTER PROCEDURE generation."""

    def test_full_signature(self, catalog):
        """Should render inputs, RETURNS and the stored body."""
        lines = export_procedures(catalog)

        header_index = lines.index("-- Procedure: GET_TOTAL") + 1
        assert lines[header_index] == (
            "CREATE OR ALTER PROCEDURE GET_TOTAL (\n"
            "    CUSTOMER_ID D_ID\n"
            ")\n"
            "RETURNS (\n"
            "    TOTAL NUMERIC(15, 2)\n"
            ")\n"
            "AS"
        )
        assert lines[header_index + 1] == GET_TOTAL_SOURCE.strip()

    def test_no_inputs(self, catalog):
        """Should omit the input list when there are no inputs."""
        lines = export_procedures(catalog)

        header_index = lines.index("-- Procedure: PING") + 1
        assert lines[header_index] == (
            "CREATE OR ALTER PROCEDURE PING\n"
            "RETURNS (\n"
            "    PONG SMALLINT\n"
            ")\n"
            "AS"
        )

    def test_missing_source_placeholder(self, catalog):
        """Should emit a comment instead of an empty CREATE statement."""
        lines = export_procedures(catalog)

        index = lines.index("-- Procedure: LEGACY_PROC")
        assert lines[index + 1] == MISSING_SOURCE_COMMENT
        assert not any(line.startswith("CREATE OR ALTER PROCEDURE LEGACY_PROC") for line in lines)

    def test_blank_source_placeholder(self):
        """Should treat whitespace-only source as missing."""
        catalog = FakeCatalog({PROCEDURES_SQL: [{"NAME": "EMPTY", "SRC": "   \n"}]})
        assert export_procedures(catalog) == [
            "-- PROCEDURES",
            "",
            "-- Procedure: EMPTY",
            MISSING_SOURCE_COMMENT,
        ]


# =============================================================================
# Export Tests
# =============================================================================

class TestExportScripts:
    """Test writing export files."""

    def test_writes_all_files(self, catalog, tmp_path):
        """Should create the output dir and write three scripts plus metadata."""
        output_dir = tmp_path / "out" / "schema"
        result = export_scripts(catalog, output_dir)

        names = sorted(p.name for p in result.files)
        assert names == ["domains.sql", "metadata.json", "procedures.sql", "tables.sql"]

        domains_text = (output_dir / "domains.sql").read_text(encoding="utf-8")
        assert domains_text == "-- DOMAINS\nCREATE DOMAIN D_ID AS INTEGER NOT NULL;\nCREATE DOMAIN D_NAME AS VARCHAR(50);\n"

    def test_metadata_json(self, catalog, tmp_path):
        """Should store the three line lists under their keys."""
        result = export_scripts(catalog, tmp_path)

        metadata = json.loads((tmp_path / "metadata.json").read_text(encoding="utf-8"))
        assert set(metadata) == {"Domains", "Tables", "Procedures"}
        assert metadata["Domains"] == result.domains
        assert metadata["Tables"] == result.tables
        assert metadata["Procedures"] == result.procedures

    def test_round_trip_through_splitter(self, catalog, tmp_path):
        """Should produce scripts that split back into the rendered DDL."""
        export_scripts(catalog, tmp_path)

        domain_statements = split_sql_statements((tmp_path / "domains.sql").read_text(encoding="utf-8"))
        assert domain_statements == [
            "-- DOMAINS\nCREATE DOMAIN D_ID AS INTEGER NOT NULL",
            "CREATE DOMAIN D_NAME AS VARCHAR(50)",
        ]

        table_statements = split_sql_statements((tmp_path / "tables.sql").read_text(encoding="utf-8"))
        assert len(table_statements) == 2
        assert table_statements[0].endswith("CREATE TABLE CUSTOMER (\n    ID D_ID,\n    NAME D_NAME NOT NULL,\n"
                                            "    CREATED_AT TIMESTAMP\n)")
        assert table_statements[1].startswith("-- Table: ORDERS\nCREATE TABLE ORDERS (")

        blocks = extract_procedure_blocks((tmp_path / "procedures.sql").read_text(encoding="utf-8"))
        assert [b.split("\n", 1)[0] for b in blocks] == [
            "CREATE OR ALTER PROCEDURE GET_TOTAL (",
            "CREATE OR ALTER PROCEDURE PING",
        ]
