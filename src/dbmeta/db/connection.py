"""Firebird connection handling.

Wraps firebird-driver behind the two narrow capabilities the rest of the
tool needs:
- row reads for catalog introspection (query_rows)
- a single transaction with begin/execute/commit/rollback for scripts
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Sequence

from firebird.driver import Connection, connect, create_database, driver_config
from pydantic import BaseModel, Field

from dbmeta.config import settings

logger = logging.getLogger(__name__)


# Keys accepted in "Key=Value;Key=Value" connection strings (lowercased, no spaces)
_KEY_ALIASES = {
    "database": "database",
    "initialcatalog": "database",
    "datasource": "host",
    "server": "host",
    "host": "host",
    "port": "port",
    "user": "user",
    "userid": "user",
    "username": "user",
    "password": "password",
    "pwd": "password",
    "charset": "charset",
    "role": "role",
}


class ConnectionParams(BaseModel):
    """Parsed connection parameters."""
    database: str = Field(..., min_length=1, description="Database path or alias")
    host: str | None = Field(None, description="Server host; None when embedded in database")
    port: int | None = Field(None, description="Server port")
    user: str | None = Field(None, description="User name")
    password: str | None = Field(None, description="Password")
    charset: str = Field("UTF8", description="Connection character set")
    role: str | None = Field(None, description="SQL role")

    @property
    def dsn(self) -> str:
        """Firebird DSN: host[/port]:database, or the database alone."""
        if not self.host:
            return self.database
        if self.port:
            return f"{self.host}/{self.port}:{self.database}"
        return f"{self.host}:{self.database}"

    @classmethod
    def from_connection_string(cls, connection_string: str) -> ConnectionParams:
        """Parse a connection string.

        Accepts either a plain Firebird DSN ("localhost:/data/app.fdb") or a
        "DataSource=localhost;Database=/data/app.fdb;User=SYSDBA;Password=..."
        string. Credentials missing from the string come from settings.

        Raises:
            ValueError: If no database can be found in the string
        """
        text = connection_string.strip()
        if not text:
            raise ValueError("Connection string is empty")

        if "=" not in text:
            return cls(
                database=text,
                user=settings.user,
                password=settings.password,
                charset=settings.charset,
            )

        values: dict[str, Any] = {}
        for part in text.split(";"):
            if not part.strip():
                continue
            key, sep, value = part.partition("=")
            if not sep:
                raise ValueError(f"Malformed connection string segment: {part!r}")
            normalized = key.strip().lower().replace(" ", "").replace("_", "")
            field_name = _KEY_ALIASES.get(normalized)
            if field_name is None:
                logger.debug(f"Ignoring connection string key: {key.strip()}")
                continue
            values[field_name] = value.strip()

        if "database" not in values:
            raise ValueError("Connection string has no Database entry")

        values.setdefault("user", settings.user)
        values.setdefault("password", settings.password)
        values.setdefault("charset", settings.charset)
        return cls.model_validate(values)

    def log_redacted(self) -> dict:
        """Get parameters with the password redacted for logging."""
        data = self.model_dump()
        if data.get("password"):
            data["password"] = "***"
        return data


def _read_blob(reader: Any) -> Any:
    """Read a stream blob fully and release it."""
    try:
        return reader.read()
    finally:
        reader.close()


class FirebirdSession:
    """One open Firebird connection.

    Reads use the connection's main transaction. Script execution drives the
    same transaction explicitly through begin/commit/rollback.
    """

    def __init__(self, connection: Connection):
        self._connection = connection

    def query_rows(self, sql: str, params: Sequence[Any] | None = None) -> list[dict[str, Any]]:
        """Run a read query and return rows as column-name dicts.

        Text blobs that come back as stream readers are read into strings.
        """
        with self._connection.cursor() as cur:
            cur.execute(sql, params)
            names = [desc[0] for desc in cur.description]
            rows = []
            for raw in cur.fetchall():
                row = {}
                for name, value in zip(names, raw):
                    if hasattr(value, "read"):
                        value = _read_blob(value)
                    row[name] = value
                rows.append(row)
            return rows

    def begin(self) -> None:
        self._connection.begin()

    def execute(self, statement: str) -> None:
        with self._connection.cursor() as cur:
            cur.execute(statement)

    def commit(self) -> None:
        self._connection.commit()

    def rollback(self) -> None:
        """Roll back the main transaction if it is still active.

        A failed commit can leave the transaction already finished.
        """
        if self._connection.main_transaction.is_active():
            self._connection.rollback()

    def close(self) -> None:
        self._connection.close()


@contextmanager
def open_session(params: ConnectionParams) -> Iterator[FirebirdSession]:
    """Connect to a database for the duration of one operation.

    Example:
        with open_session(params) as session:
            rows = session.query_rows("SELECT 1 FROM RDB$DATABASE")
    """
    logger.info(f"Connecting to database: {params.log_redacted()}")
    connection = connect(
        params.dsn,
        user=params.user,
        password=params.password,
        role=params.role,
        charset=params.charset,
    )
    session = FirebirdSession(connection)
    try:
        yield session
    finally:
        session.close()


def create_empty_database(params: ConnectionParams, page_size: int | None = None) -> None:
    """Create a new, empty database file.

    The page size is not a create_database() argument; firebird-driver reads
    it from the database defaults of its driver_config.

    Args:
        params: Target DSN and administrator credentials
        page_size: Optional page size in bytes; server default when None
    """
    if page_size:
        driver_config.db_defaults.page_size.value = page_size
        logger.debug(f"Page size for new databases: {page_size}")

    logger.info(f"Creating database: {params.dsn}")
    connection = create_database(
        params.dsn,
        user=params.user,
        password=params.password,
        charset=params.charset,
    )
    connection.close()


def database_params_for_file(db_path: Path, user: str, password: str) -> ConnectionParams:
    """Connection parameters for a local database file on the configured server."""
    return ConnectionParams(
        database=str(db_path),
        host=settings.host,
        port=settings.port,
        user=user,
        password=password,
        charset=settings.charset,
    )
