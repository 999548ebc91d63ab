"""
Pure Enumeration Types for the Bootstrap Engine.

Defines run modes, catalog object kinds, pipeline stages and grant tiers.
No business logic - pure type definitions only.

Exports:
    RunMode: Apply against the database or record commands offline
    ObjectKind: Catalog object kinds that support existence checks
    Stage: Pipeline stages in execution order
    GrantTier: Schema grant privilege tiers in emission order
    CommandKind: DDL vs ACL statement classification
"""

from enum import Enum


class RunMode(Enum):
    """
    How the bootstrapper executes commands.

    APPLY connects and executes. DRY_RUN never connects; every object is
    treated as absent and the full command sequence is recorded.
    """

    APPLY = "apply"
    DRY_RUN = "dry_run"


class ObjectKind(Enum):
    """
    Catalog object kinds the engine checks for before creating.

    The value doubles as the object_kind reported in errors.
    """

    ROLE = "role"
    DATABASE = "database"
    EXTENSION = "extension"
    SCHEMA = "schema"


class Stage(Enum):
    """
    Pipeline stages, declared in execution order.

    Roles before databases (owners must exist), databases before
    extensions and schemas (per-database connections need the database).
    """

    SECRETS = "secrets"
    ROLES = "roles"
    DATABASES = "databases"
    EXTENSIONS = "extensions"
    SCHEMAS = "schemas"


class GrantTier(Enum):
    """
    Privilege tiers of a schema grant, declared in emission order.

    DEFAULT is a standing rule for tables the schema owner creates later.
    """

    SCHEMA = "schema"
    TABLES = "tables"
    SEQUENCES = "sequences"
    FUNCTIONS = "functions"
    DEFAULT = "default"


class CommandKind(Enum):
    """Statement class; selects execute_ddl or execute_grant on a session."""

    DDL = "ddl"
    ACL = "acl"
