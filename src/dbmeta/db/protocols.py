"""Narrow database capabilities used by the script executor and catalog reader.

FirebirdSession implements both; tests substitute small fakes.
"""
from __future__ import annotations

from typing import Any, Protocol, Sequence


class RowSource(Protocol):
    """Anything that can run a read query and return rows keyed by column name."""

    def query_rows(self, sql: str, params: Sequence[Any] | None = None) -> list[dict[str, Any]]:
        ...


class TransactionTarget(Protocol):
    """Anything that can run statements inside one explicit transaction."""

    def begin(self) -> None:
        ...

    def execute(self, statement: str) -> None:
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...
