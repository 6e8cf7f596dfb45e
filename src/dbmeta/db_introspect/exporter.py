"""Export a live database schema into DDL script files.

Writes to the output directory:
- domains.sql, tables.sql, procedures.sql (one list element per line)
- metadata.json with the same three line lists
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from dbmeta.db.protocols import RowSource
from .ddl_generator import export_domains, export_procedures, export_tables

logger = logging.getLogger(__name__)

METADATA_FILE = "metadata.json"


@dataclass
class ExportResult:
    """Files written by an export and the lines that went into them."""
    output_dir: Path
    domains: list[str] = field(default_factory=list)
    tables: list[str] = field(default_factory=list)
    procedures: list[str] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)

    def as_metadata(self) -> dict[str, list[str]]:
        return {
            "Domains": self.domains,
            "Tables": self.tables,
            "Procedures": self.procedures,
        }


def write_script(path: Path, lines: list[str]) -> None:
    """Write script lines as UTF-8 text, one element per line."""
    path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")


def export_scripts(source: RowSource, output_dir: Path | str) -> ExportResult:
    """Read the schema and write script files plus metadata.json.

    Args:
        source: Open session on the database to export
        output_dir: Target directory, created if missing

    Returns:
        ExportResult with generated lines and written paths
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    logger.info("[export] Reading domains")
    domains = export_domains(source)
    logger.info("[export] Reading tables")
    tables = export_tables(source)
    logger.info("[export] Reading procedures")
    procedures = export_procedures(source)

    result = ExportResult(
        output_dir=output_dir,
        domains=domains,
        tables=tables,
        procedures=procedures,
    )

    for file_name, lines in (
        ("domains.sql", domains),
        ("tables.sql", tables),
        ("procedures.sql", procedures),
    ):
        path = output_dir / file_name
        write_script(path, lines)
        result.files.append(path)
        logger.info(f"[export] Wrote {path}")

    metadata_path = output_dir / METADATA_FILE
    metadata_path.write_text(
        json.dumps(result.as_metadata(), indent=2, ensure_ascii=False),
        encoding="utf-8"
    )
    result.files.append(metadata_path)
    logger.info(f"[export] Wrote {metadata_path}")

    return result
