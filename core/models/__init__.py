"""
Core Data Models Package.

Contains pure data structures without business logic.
Provisioning logic lives in the services package.

Exports:
    DesiredState, RoleSpec, DatabaseSpec, DatabaseGrant, SchemaSpec, SchemaGrant: Document models
    UserSubject, RoleSubject, Subject: Grant subject variants
    RunMode, ObjectKind, Stage, GrantTier, CommandKind: Enums
    CreateRole, GrantRoleMembership, CreateDatabase, GrantDatabasePrivileges,
    CreateExtension, CreateSchema, GrantSchemaPrivileges, Command: Command values
    StepResult, BootstrapResult: Run results
"""

# Enums
from .enums import (
    RunMode,
    ObjectKind,
    Stage,
    GrantTier,
    CommandKind
)

# Desired state
from .desired_state import (
    DesiredState,
    RoleSpec,
    DatabaseSpec,
    DatabaseGrant,
    SchemaSpec,
    SchemaGrant,
    UserSubject,
    RoleSubject,
    Subject
)

# Commands
from .commands import (
    Command,
    CreateRole,
    GrantRoleMembership,
    CreateDatabase,
    GrantDatabasePrivileges,
    CreateExtension,
    CreateSchema,
    GrantSchemaPrivileges
)

# Results
from .results import (
    StepResult,
    BootstrapResult
)

__all__ = [
    # Enums
    'RunMode',
    'ObjectKind',
    'Stage',
    'GrantTier',
    'CommandKind',

    # Desired state
    'DesiredState',
    'RoleSpec',
    'DatabaseSpec',
    'DatabaseGrant',
    'SchemaSpec',
    'SchemaGrant',
    'UserSubject',
    'RoleSubject',
    'Subject',

    # Commands
    'Command',
    'CreateRole',
    'GrantRoleMembership',
    'CreateDatabase',
    'GrantDatabasePrivileges',
    'CreateExtension',
    'CreateSchema',
    'GrantSchemaPrivileges',

    # Results
    'StepResult',
    'BootstrapResult',
]
