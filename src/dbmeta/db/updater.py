"""Apply updated scripts to an existing database.

Reconciling a live schema with changed scripts needs a schema diff and a
migration plan, neither of which exists yet. Until then the operation is
reserved and always fails.
"""
from __future__ import annotations

from pathlib import Path


def update_database(connection_string: str, scripts_dir: Path | str) -> None:
    """Update an existing database from scripts.

    Raises:
        NotImplementedError: Always
    """
    raise NotImplementedError(
        f"update-db is not implemented (scripts directory: {scripts_dir})"
    )
