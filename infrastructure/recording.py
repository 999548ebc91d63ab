"""
Recording Admin Sessions - Offline IAdminSession Implementation.

Used for dry runs (RunMode.DRY_RUN) and as the in-memory catalog in tests.
Nothing connects; every executed command is appended to a shared list in
execution order, and created objects are added to an in-memory catalog so a
later existence check in the same run sees them.

Exports:
    RecordedCommand: One executed command plus the database it targeted
    RecordingSession: IAdminSession over the in-memory catalog
    RecordingConnectionProvider: IConnectionProvider producing RecordingSessions
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from core.models.commands import Command
from core.models.enums import CommandKind, ObjectKind
from core.schema.sql_renderer import SQLRenderer

from .interface_repository import IAdminSession, IConnectionProvider

# Roles and databases are cluster-wide; extensions and schemas are keyed by database
_CLUSTER_KINDS = (ObjectKind.ROLE, ObjectKind.DATABASE)

CatalogKey = Tuple[ObjectKind, Optional[str], str]


@dataclass(frozen=True)
class RecordedCommand:
    """A command as it would have been sent, with its target database."""
    database: Optional[str]
    command: Command

    @property
    def sql(self) -> str:
        """Log-safe text (password redacted)."""
        return SQLRenderer.to_text(self.command)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "database": self.database,
            "kind": self.command.kind.value,
            "sql": self.sql,
        }


class RecordingSession(IAdminSession):
    """IAdminSession without a server. See RecordingConnectionProvider."""

    def __init__(self, provider: "RecordingConnectionProvider", database: Optional[str]):
        self._provider = provider
        self._database = database

    @property
    def database(self) -> Optional[str]:
        return self._database

    def object_exists(self, kind: ObjectKind, name: str) -> bool:
        return self._provider.has(kind, name, self._database)

    def execute_ddl(self, command: Command) -> None:
        self._provider.record(self._database, command, CommandKind.DDL)

    def execute_grant(self, command: Command) -> None:
        self._provider.record(self._database, command, CommandKind.ACL)


class RecordingConnectionProvider(IConnectionProvider):
    """
    Offline connection provider.

    Args:
        existing: Objects present before the run, as (kind, name) for
            roles/databases or (kind, name, database) for extensions/schemas.
            Dry runs pass nothing, so every object is treated as absent.

    Attributes:
        commands: Every executed command in order
        sessions_opened: Target database of each session() call, in order
    """

    def __init__(self, existing: Optional[Iterable[tuple]] = None):
        self._catalog: Set[CatalogKey] = set()
        self.commands: List[RecordedCommand] = []
        self.sessions_opened: List[Optional[str]] = []
        for entry in existing or ():
            kind, name = entry[0], entry[1]
            database = entry[2] if len(entry) > 2 else None
            self._catalog.add(self._key(kind, name, database))

    @staticmethod
    def _key(kind: ObjectKind, name: str, database: Optional[str]) -> CatalogKey:
        return (kind, None if kind in _CLUSTER_KINDS else database, name)

    def has(self, kind: ObjectKind, name: str, database: Optional[str] = None) -> bool:
        return self._key(kind, name, database) in self._catalog

    def record(self, database: Optional[str], command: Command, via: CommandKind) -> None:
        if command.kind is not via:
            raise TypeError(
                f"{type(command).__name__} is a {command.kind.value} command, "
                f"executed as {via.value}"
            )
        self.commands.append(RecordedCommand(database=database, command=command))
        if via is CommandKind.DDL:
            self._catalog.add(self._key(command.object_kind, command.object_name, database))

    @property
    def statements(self) -> List[str]:
        """Redacted SQL text of every recorded command."""
        return [recorded.sql for recorded in self.commands]

    def created(self, kind: ObjectKind) -> List[str]:
        """Names of objects of one kind created during the run."""
        return [
            recorded.command.object_name
            for recorded in self.commands
            if recorded.command.kind is CommandKind.DDL and recorded.command.object_kind is kind
        ]

    @contextmanager
    def session(self, database: Optional[str] = None) -> Iterator[RecordingSession]:
        self.sessions_opened.append(database)
        yield RecordingSession(self, database)
