"""
Administrative Command Values.

Every statement the engine issues is first built as one of these frozen
values and only rendered to SQL at the session boundary
(core.schema.sql_renderer). Provisioners never format SQL text.

Exports:
    Command: Union of all command types
    CreateRole, GrantRoleMembership: Role stage
    CreateDatabase, GrantDatabasePrivileges: Database stage
    CreateExtension: Extension stage
    CreateSchema, GrantSchemaPrivileges: Schema stage
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from .desired_state import Subject
from .enums import CommandKind, GrantTier, ObjectKind


@dataclass(frozen=True)
class CreateRole:
    """CREATE ROLE name [WITH LOGIN PASSWORD '...']"""
    name: str
    login: bool = False
    password: Optional[str] = field(default=None, repr=False)

    kind = CommandKind.DDL
    object_kind = ObjectKind.ROLE

    @property
    def object_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class GrantRoleMembership:
    """GRANT member_of TO role"""
    role: str
    member_of: str

    kind = CommandKind.ACL
    object_kind = ObjectKind.ROLE

    @property
    def object_name(self) -> str:
        return self.role


@dataclass(frozen=True)
class CreateDatabase:
    """
    CREATE DATABASE with only the supplied clauses.

    Clause order is fixed: OWNER, ENCODING, LC_COLLATE, LC_CTYPE, TEMPLATE.
    """
    name: str
    owner: Optional[str] = None
    encoding: Optional[str] = None
    lc_collate: Optional[str] = None
    lc_ctype: Optional[str] = None
    template: Optional[str] = None

    kind = CommandKind.DDL
    object_kind = ObjectKind.DATABASE

    @property
    def object_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class GrantDatabasePrivileges:
    """GRANT p1, p2 ON DATABASE name TO grantee"""
    database: str
    grantee: str
    privileges: Tuple[str, ...]

    kind = CommandKind.ACL
    object_kind = ObjectKind.DATABASE

    @property
    def object_name(self) -> str:
        return self.database


@dataclass(frozen=True)
class CreateExtension:
    """CREATE EXTENSION IF NOT EXISTS "name" in the session's database"""
    name: str

    kind = CommandKind.DDL
    object_kind = ObjectKind.EXTENSION

    @property
    def object_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class CreateSchema:
    """CREATE SCHEMA name AUTHORIZATION owner"""
    name: str
    owner: str

    kind = CommandKind.DDL
    object_kind = ObjectKind.SCHEMA

    @property
    def object_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class GrantSchemaPrivileges:
    """
    One tier of a schema grant.

    owner is only used by the DEFAULT tier (ALTER DEFAULT PRIVILEGES FOR ROLE).
    """
    schema: str
    subject: Subject
    tier: GrantTier
    privileges: Tuple[str, ...]
    owner: Optional[str] = None

    kind = CommandKind.ACL
    object_kind = ObjectKind.SCHEMA

    @property
    def object_name(self) -> str:
        return self.schema


Command = Union[
    CreateRole,
    GrantRoleMembership,
    CreateDatabase,
    GrantDatabasePrivileges,
    CreateExtension,
    CreateSchema,
    GrantSchemaPrivileges,
]
