"""Shared test fixtures.

``FakePostgres`` stands in for a PostgreSQL server behind ``psycopg2.connect``.
It understands the COMMENT ON statements and catalog lookups issued by the
comment resource and keeps comments in memory, applying writes on commit.
"""

import re
from typing import Any

import psycopg2
import pytest

from src.infra.postgres import DbSettings, PostgresConnection

_COMMENT_RE = re.compile(
    r"""^COMMENT ON (?P<keyword>DATABASE|ROLE|TABLE) "(?P<name>(?:[^"]|"")*)" IS\s+(?P<escape>E?)'(?P<value>(?:[^']|'')*)'$"""
)

_LOOKUP_KINDS = {
    "pg_database": "DATABASE",
    "pg_roles": "ROLE",
    "pg_class": "TABLE",
}


def _unquote_literal(value: str, escape: bool) -> str:
    value = value.replace("''", "'")
    if escape:
        value = value.replace("\\\\", "\\")
    return value


class FakeCursor:
    def __init__(self, conn: "FakeConnection") -> None:
        self._conn = conn
        self._row: tuple[Any, ...] | None = None

    def execute(self, sql: str, params: tuple[Any, ...] | None = None) -> None:
        self._conn.server.log.append((self._conn.dbname, sql, params))
        if self._conn.server.fail_on and self._conn.server.fail_on in sql:
            raise psycopg2.ProgrammingError(self._conn.server.fail_message)

        match = _COMMENT_RE.match(sql)
        if match:
            name = match.group("name").replace('""', '"')
            value = _unquote_literal(match.group("value"), bool(match.group("escape")))
            key = self._conn.server.key(match.group("keyword"), name, self._conn.dbname)
            self._conn.pending[key] = value
            return

        if sql.startswith("SELECT description"):
            kind = next(k for table, k in _LOOKUP_KINDS.items() if table in sql)
            assert params is not None
            key = self._conn.server.key(kind, params[0], self._conn.dbname)
            stored = self._conn.server.comments.get(key)
            self._row = None if stored is None else (stored,)
            return

        if sql == "SELECT version()":
            self._row = (f"PostgreSQL {self._conn.server_version}",)
            return

        raise AssertionError(f"Unexpected SQL: {sql}")

    def fetchone(self) -> tuple[Any, ...] | None:
        return self._row

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, *args: Any) -> None:
        pass


class FakeConnection:
    def __init__(self, server: "FakePostgres", dbname: str) -> None:
        self.server = server
        self.dbname = dbname
        self.closed = 0
        self.server_version = server.server_version
        self.pending: dict[tuple[str, ...], str] = {}
        self.commits = 0
        self.rollbacks = 0

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def commit(self) -> None:
        if self.server.fail_commit:
            raise psycopg2.OperationalError("server closed the connection unexpectedly")
        for key, value in self.pending.items():
            # COMMENT ... IS '' removes the catalog row
            if value:
                self.server.comments[key] = value
            else:
                self.server.comments.pop(key, None)
        self.pending = {}
        self.commits += 1

    def rollback(self) -> None:
        self.pending = {}
        self.rollbacks += 1

    def close(self) -> None:
        self.closed = 1

    def __enter__(self) -> "FakeConnection":
        return self

    def __exit__(self, *args: Any) -> None:
        pass


class FakePostgres:
    """In-memory comment catalog reachable through psycopg2.connect."""

    def __init__(self, server_version: int = 150002) -> None:
        self.server_version = server_version
        self.comments: dict[tuple[str, ...], str] = {}
        self.connections: list[FakeConnection] = []
        self.log: list[tuple[str, str, tuple[Any, ...] | None]] = []
        self.fail_on: str | None = None
        self.fail_message = "permission denied"
        self.fail_commit = False
        self.refuse_connections = False

    @staticmethod
    def key(kind: str, name: str, dbname: str) -> tuple[str, ...]:
        # Database and role comments are cluster-wide, table comments are not
        if kind == "TABLE":
            return (kind, dbname, name)
        return (kind, name)

    def connect(self, **dsn: Any) -> FakeConnection:
        if self.refuse_connections:
            raise psycopg2.OperationalError("could not connect to server")
        conn = FakeConnection(self, dsn["dbname"])
        self.connections.append(conn)
        return conn

    def set_comment(self, kind: str, name: str, value: str, dbname: str = "postgres") -> None:
        """Change a comment out of band."""
        self.comments[self.key(kind, name, dbname)] = value

    def get_comment(self, kind: str, name: str, dbname: str = "postgres") -> str | None:
        return self.comments.get(self.key(kind, name, dbname))

    def statements(self) -> list[tuple[str, str]]:
        """(database, sql) of every COMMENT ON statement executed."""
        return [(db, sql) for db, sql, _ in self.log if sql.startswith("COMMENT ON")]


@pytest.fixture
def db_settings():
    return DbSettings(
        host="db.example.com",
        port=5432,
        database="postgres",
        username="admin",
        password="secret",
    )


@pytest.fixture
def fake_postgres(monkeypatch):
    server = FakePostgres()
    monkeypatch.setattr(psycopg2, "connect", server.connect)
    return server


@pytest.fixture
def pg_connection(db_settings, fake_postgres):
    with PostgresConnection(db_settings) as conn:
        yield conn
