"""
Session Abstract Base Classes - Single Point of Truth.

Enforces exact method signatures across the live PostgreSQL implementation
and the offline recording implementation used for dry runs and tests.

Philosophy: "Define once, enforce everywhere"

Exports:
    IAdminSession: One administrative connection (existence checks, DDL, ACL)
    IConnectionProvider: Scoped acquisition of admin sessions
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional

from core.models.commands import Command
from core.models.enums import ObjectKind


# ============================================================================
# ABSTRACT BASE CLASSES - Enforce exact signatures
# ============================================================================

class IAdminSession(ABC):
    """
    Administrative session interface with EXACT method signatures.

    A session is bound to one database for its whole life. Roles and
    databases are cluster-wide, extensions and schemas are per-database.
    """

    @property
    @abstractmethod
    def database(self) -> Optional[str]:
        """Database this session is connected to (None = default database)."""
        pass

    @abstractmethod
    def object_exists(self, kind: ObjectKind, name: str) -> bool:
        """
        Check the catalog for an object.

        Raises:
            Exception: driver error; provisioners wrap it in ExistenceCheckFailure
        """
        pass

    @abstractmethod
    def execute_ddl(self, command: Command) -> None:
        """Execute a CREATE statement."""
        pass

    @abstractmethod
    def execute_grant(self, command: Command) -> None:
        """Execute a GRANT / ALTER DEFAULT PRIVILEGES statement."""
        pass


class IConnectionProvider(ABC):
    """
    Connection acquisition interface.

    session() is a context manager; the connection is closed on every
    exit path.
    """

    @abstractmethod
    def session(self, database: Optional[str] = None) -> AbstractContextManager:
        """
        Open an admin session.

        Args:
            database: Target database; None = database from the admin DSN

        Raises:
            ConnectionFailure: cannot connect
        """
        pass
