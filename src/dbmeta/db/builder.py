"""Build a new database from DDL scripts.

Creates an empty database file, then applies the scripts found in the
scripts directory in dependency order. Each script is atomic on its own; a
failed script is reported and the build carries on with the next one.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from dbmeta.config import AdminCredentials, settings
from dbmeta.db.connection import create_empty_database, database_params_for_file, open_session
from dbmeta.db.script_executor import ScriptMode, execute_script

logger = logging.getLogger(__name__)

# Scripts applied by build-db, in order
BUILD_SCRIPTS = [
    ("domains.sql", ScriptMode.STATEMENTS),
    ("tables.sql", ScriptMode.STATEMENTS),
]
PROCEDURES_SCRIPT = ("procedures.sql", ScriptMode.PROCEDURES)


@dataclass
class BuildReport:
    """Outcome of a build-db run."""
    database_path: Path
    scripts_dir: Path
    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def build_database(
    db_dir: Path | str,
    scripts_dir: Path | str,
    credentials_file: Path | str | None = None,
    include_procedures: bool = False,
) -> BuildReport:
    """Create a new database in db_dir and apply the build scripts.

    Args:
        db_dir: Directory that will hold the new database file
        scripts_dir: Directory with domains.sql, tables.sql (and procedures.sql)
        credentials_file: Administrator credentials file; settings default if None
        include_procedures: Also apply procedures.sql in procedures mode

    Returns:
        BuildReport with applied/skipped scripts and collected errors

    Raises:
        ValueError: If a directory argument is blank
        FileNotFoundError: If scripts_dir or the credentials file is missing
        FileExistsError: If the database file already exists
    """
    if not str(db_dir).strip():
        raise ValueError("Database directory path is empty")
    if not str(scripts_dir).strip():
        raise ValueError("Scripts directory path is empty")

    db_dir = Path(db_dir)
    scripts_dir = Path(scripts_dir)

    if not scripts_dir.is_dir():
        raise FileNotFoundError(f"Scripts directory does not exist: {scripts_dir}")

    db_path = db_dir / settings.db_file_name
    if db_path.exists():
        raise FileExistsError(f"Database file already exists: {db_path}")

    credentials = AdminCredentials.from_file(credentials_file or settings.credentials_file)
    logger.debug(f"Using credentials: {credentials.log_redacted()}")

    params = database_params_for_file(db_path, credentials.user, credentials.password)

    logger.info(f"[build-db] Creating database: {db_path}")
    create_empty_database(params, page_size=settings.page_size)
    logger.info("[build-db] Database created")

    report = BuildReport(database_path=db_path, scripts_dir=scripts_dir)

    scripts = list(BUILD_SCRIPTS)
    if include_procedures:
        scripts.append(PROCEDURES_SCRIPT)

    with open_session(params) as session:
        for file_name, mode in scripts:
            script_path = scripts_dir / file_name
            present = script_path.exists()
            succeeded = execute_script(session, script_path, file_name, report.errors, mode)
            if not present:
                report.skipped.append(file_name)
            elif succeeded:
                report.applied.append(file_name)

    return report


def format_build_report(report: BuildReport) -> str:
    """Render the end-of-build summary shown to the operator."""
    lines = [
        "",
        "===== build-db report =====",
        f"Database path: {report.database_path}",
        f"Scripts directory: {report.scripts_dir}",
    ]
    if report.skipped:
        lines.append(f"Skipped (not found): {', '.join(report.skipped)}")

    if report.ok:
        lines.append("All scripts executed successfully.")
    else:
        lines.append("Errors occurred while executing scripts:")
        lines.extend(f" - {e}" for e in report.errors)

    return "\n".join(lines)
