"""
PostgreSQLConnectionProvider tests with psycopg.connect patched out.
"""

from unittest.mock import MagicMock

import psycopg
import pytest

from config import DatabaseConfig
from core.models.commands import CreateSchema
from core.models.enums import ObjectKind
from exceptions import ConnectionFailure
from infrastructure import postgresql
from infrastructure.postgresql import PostgreSQLAdminSession, PostgreSQLConnectionProvider


@pytest.fixture
def provider():
    return PostgreSQLConnectionProvider(DatabaseConfig(url="postgres://admin:pw@localhost:5432/postgres"))


def test_connection_error_wrapped(monkeypatch, provider):
    def refuse(*args, **kwargs):
        raise psycopg.OperationalError("connection refused")

    monkeypatch.setattr(postgresql.psycopg, "connect", refuse)
    with pytest.raises(ConnectionFailure) as exc_info:
        with provider.session("app_db"):
            pass
    error = exc_info.value
    assert error.object_kind == "database"
    assert error.object_name == "app_db"
    assert error.stage is None
    assert isinstance(error.__cause__, psycopg.OperationalError)


def test_session_autocommit_and_closed(monkeypatch, provider):
    conn = MagicMock()
    connect = MagicMock(return_value=conn)
    monkeypatch.setattr(postgresql.psycopg, "connect", connect)

    with provider.session("app_db") as session:
        assert session.database == "app_db"

    conninfo = connect.call_args.args[0]
    assert "dbname=app_db" in conninfo
    assert connect.call_args.kwargs == {"autocommit": True}
    conn.close.assert_called_once()


def test_connection_closed_on_failure(monkeypatch, provider):
    conn = MagicMock()
    monkeypatch.setattr(postgresql.psycopg, "connect", MagicMock(return_value=conn))
    with pytest.raises(RuntimeError):
        with provider.session():
            raise RuntimeError("boom")
    conn.close.assert_called_once()


def test_default_session_uses_dsn_database(monkeypatch, provider):
    monkeypatch.setattr(postgresql.psycopg, "connect", MagicMock())
    with provider.session() as session:
        assert session.database == "postgres"


class TestAdminSession:

    def _session(self, row):
        conn = MagicMock()
        cursor = conn.cursor.return_value.__enter__.return_value
        cursor.fetchone.return_value = row
        return PostgreSQLAdminSession(conn, "app_db"), cursor

    def test_object_exists_queries_catalog(self):
        session, cursor = self._session((True,))
        assert session.object_exists(ObjectKind.SCHEMA, "app") is True
        query, params = cursor.execute.call_args.args
        assert "pg_namespace" in query.as_string(None)
        assert params == ("app",)

    def test_object_absent(self):
        session, _ = self._session((False,))
        assert session.object_exists(ObjectKind.ROLE, "ghost") is False

    def test_ddl_executes_composed_statement(self):
        session, cursor = self._session(None)
        session.execute_ddl(CreateSchema(name="app", owner="o"))
        statement = cursor.execute.call_args.args[0]
        assert statement.as_string(None) == 'CREATE SCHEMA "app" AUTHORIZATION "o"'
