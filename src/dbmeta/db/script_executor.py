"""Run DDL scripts against a database.

A script is applied all-or-nothing: every statement runs inside one
transaction, and the first failing statement rolls the whole script back.
Failures are recorded in a caller-owned error list instead of being raised,
so that the next script still runs.
"""
from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from dbmeta.db.protocols import TransactionTarget
from dbmeta.sql_schema.splitter import extract_procedure_blocks, split_sql_statements

logger = logging.getLogger(__name__)


class ScriptMode(str, Enum):
    """How a script's text is cut into statements."""
    STATEMENTS = "statements"  # ';' at end of line
    PROCEDURES = "procedures"  # one block per CREATE OR ALTER PROCEDURE


def parse_script(content: str, mode: ScriptMode = ScriptMode.STATEMENTS) -> list[str]:
    """Cut script text into executable units for the given mode."""
    if mode == ScriptMode.PROCEDURES:
        return extract_procedure_blocks(content)
    return split_sql_statements(content)


def execute_script(
    session: TransactionTarget,
    path: Path | str,
    label: str,
    errors: list[str],
    mode: ScriptMode = ScriptMode.STATEMENTS,
) -> bool:
    """Execute a script file if it exists.

    A missing file is skipped and counts as success.

    Args:
        session: Open database session
        path: Script file
        label: Name used in log lines and error entries (usually the file name)
        errors: Error list to append "<label>: <message>" to on failure
        mode: Statement splitting rule

    Returns:
        True if the script was applied or skipped, False if it was rolled back
    """
    path = Path(path)

    if not path.exists():
        logger.info(f"[build-db] {label} not found, skipping")
        return True

    if mode == ScriptMode.PROCEDURES:
        logger.info(f"[build-db] Executing {label} (procedures)...")
    else:
        logger.info(f"[build-db] Executing {label}...")

    content = path.read_text(encoding="utf-8")
    return execute_statements(session, parse_script(content, mode), label, errors)


def execute_statements(
    session: TransactionTarget,
    statements: list[str],
    label: str,
    errors: list[str],
) -> bool:
    """Execute statements in one transaction, rolling back on the first failure.

    Args:
        session: Open database session
        statements: Statements in execution order; blank entries are ignored
        label: Name used in log lines and error entries
        errors: Error list to append to on failure

    Returns:
        True if all statements ran and the transaction was committed
    """
    try:
        session.begin()
        for statement in statements:
            statement = statement.strip()
            if not statement:
                continue
            session.execute(statement)
        # DDL is applied at commit, so metadata errors often surface here
        session.commit()
    except Exception as e:
        session.rollback()
        message = f"{label}: {e}"
        logger.error(f"[build-db] FAILED: {message}")
        errors.append(message)
        return False

    logger.info(f"[build-db] {label} OK")
    return True
