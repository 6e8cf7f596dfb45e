"""Shared pytest fixtures for all tests."""
import pytest


class FakeSession:
    """In-memory stand-in for a database session.

    Statements executed inside a transaction only become visible in
    `committed` after commit(); rollback() discards them. With
    `fail_on_commit` the commit itself raises and ends the transaction,
    the way deferred DDL errors surface from the server.
    """

    def __init__(self, fail_on=None, fail_on_commit=False):
        self.fail_on = set(fail_on or [])
        self.fail_on_commit = fail_on_commit
        self.executed = []
        self.committed = []
        self.calls = []
        self._pending = []
        self._active = False

    def begin(self):
        self.calls.append("begin")
        self._pending = []
        self._active = True

    def execute(self, statement):
        self.executed.append(statement)
        if statement in self.fail_on:
            raise RuntimeError(f"unsuccessful metadata update: {statement}")
        self._pending.append(statement)

    def commit(self):
        self.calls.append("commit")
        self._active = False
        if self.fail_on_commit:
            self._pending = []
            raise RuntimeError("unsuccessful metadata update at commit")
        self.committed.extend(self._pending)
        self._pending = []

    def rollback(self):
        # Rolling back a finished transaction is a no-op, as in FirebirdSession
        if not self._active:
            self.calls.append("rollback (inactive)")
            return
        self.calls.append("rollback")
        self._active = False
        self._pending = []


class FakeCatalog:
    """Row source answering catalog queries from fixture rows.

    `responses` maps a query string to either a list of rows, or a dict of
    first-parameter value -> list of rows for per-object queries.
    """

    def __init__(self, responses):
        self.responses = responses
        self.queries = []

    def query_rows(self, sql, params=None):
        self.queries.append((sql, tuple(params) if params else None))
        value = self.responses.get(sql, [])
        if isinstance(value, dict):
            return value.get(params[0], [])
        return value


@pytest.fixture
def fake_session():
    """Session with no failing statements."""
    return FakeSession()


@pytest.fixture
def credentials_file(tmp_path):
    """JSON credentials file for build-db."""
    path = tmp_path / "config.json"
    path.write_text('{"SYSDBA_USER": "SYSDBA", "SYSDBA_PASSWORD": "masterkey"}', encoding="utf-8")
    return path
