# ============================================================================
# POSTGRESQL ADMIN SESSIONS
# ============================================================================
# STATUS: Infrastructure - Live PostgreSQL implementation of IAdminSession
# PURPOSE: Stage-scoped autocommit connections for catalog existence checks,
#          DDL and ACL statements
# EXPORTS: PostgreSQLAdminSession, PostgreSQLConnectionProvider
# INTERFACES: IAdminSession, IConnectionProvider
# DEPENDENCIES: psycopg, psycopg.sql, config.DatabaseConfig
# ============================================================================

"""
PostgreSQL Admin Session Implementation - Direct Database Access

Architecture:
    IConnectionProvider (abstract)
        ↓
    PostgreSQLConnectionProvider  -- opens one connection per stage
        ↓ yields
    PostgreSQLAdminSession        -- existence checks + DDL + ACL

Key Features:
- Direct PostgreSQL access using psycopg3
- SQL composition for injection safety (statements come from SQLRenderer)
- Autocommit sessions: CREATE DATABASE cannot run inside a transaction block,
  and every statement stands alone (no all-or-nothing apply)
- Connection always closed on exit, including on failure
"""

from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg
from psycopg import sql

from config.database_config import DatabaseConfig
from core.models.commands import Command
from core.models.enums import ObjectKind
from core.schema.sql_renderer import SQLRenderer
from exceptions import ConnectionFailure
from util_logger import ComponentType, LoggerFactory

from .interface_repository import IAdminSession, IConnectionProvider

logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "PostgreSQLAdminSession")


# Catalog lookup per object kind; pg_extension and pg_namespace are per-database
_EXISTS_QUERIES = {
    ObjectKind.ROLE: sql.SQL("SELECT EXISTS(SELECT 1 FROM pg_roles WHERE rolname = %s)"),
    ObjectKind.DATABASE: sql.SQL("SELECT EXISTS(SELECT 1 FROM pg_database WHERE datname = %s)"),
    ObjectKind.EXTENSION: sql.SQL("SELECT EXISTS(SELECT 1 FROM pg_extension WHERE extname = %s)"),
    ObjectKind.SCHEMA: sql.SQL("SELECT EXISTS(SELECT 1 FROM pg_namespace WHERE nspname = %s)"),
}


class PostgreSQLAdminSession(IAdminSession):
    """
    Admin session over one open psycopg connection.

    Driver errors are NOT wrapped here; provisioners attach stage and
    object context when they wrap them.
    """

    def __init__(self, conn: psycopg.Connection, database: Optional[str] = None):
        self._conn = conn
        self._database = database

    @property
    def database(self) -> Optional[str]:
        return self._database

    def object_exists(self, kind: ObjectKind, name: str) -> bool:
        query = _EXISTS_QUERIES[kind]
        with self._conn.cursor() as cursor:
            cursor.execute(query, (name,))
            row = cursor.fetchone()
        exists = bool(row[0]) if row else False
        logger.debug(f"{kind.value} '{name}' exists={exists}")
        return exists

    def execute_ddl(self, command: Command) -> None:
        self._execute(command)

    def execute_grant(self, command: Command) -> None:
        self._execute(command)

    def _execute(self, command: Command) -> None:
        statement = SQLRenderer.render(command)
        logger.debug(
            f"Executing: {SQLRenderer.to_text(command)}",
            extra={'custom_dimensions': {'database': self._database}}
        )
        with self._conn.cursor() as cursor:
            cursor.execute(statement)


class PostgreSQLConnectionProvider(IConnectionProvider):
    """
    Opens stage-scoped admin sessions from DatabaseConfig.

    session() with no database uses the database named in DATABASE_URL;
    session("app_db") reuses the same DSN with only dbname replaced.
    """

    def __init__(self, config: DatabaseConfig):
        self.config = config

    @contextmanager
    def session(self, database: Optional[str] = None) -> Iterator[PostgreSQLAdminSession]:
        target = database or self.config.default_database
        logger.info(f"🔗 Connecting to database '{target}'")

        try:
            conn = psycopg.connect(self.config.conninfo(database), autocommit=True)
        except psycopg.Error as e:
            logger.error(f"❌ PostgreSQL connection error: {e}")
            logger.error(f"  Error type: {type(e).__name__}")
            raise ConnectionFailure(
                f"failed to connect: {e}",
                object_kind=ObjectKind.DATABASE.value,
                object_name=target,
            ) from e

        try:
            yield PostgreSQLAdminSession(conn, database=target)
        finally:
            conn.close()
            logger.debug(f"Closed connection to '{target}'")
