"""
Desired-State Models.

Pydantic models for the declarative bootstrap document: the roles, databases,
extensions, schemas and grants a cluster should have after a run. Names are
plain strings and are only resolved against the live catalog at apply time.

Models are frozen once loaded. The one runtime-populated value, a role's
resolved password, is set by building a new RoleSpec with model_copy (see
core.desired_state_loader.resolve_secrets).

Exports:
    RoleSpec: Login or non-login role plus its role memberships
    DatabaseGrant: Database-level privileges for a role
    SchemaGrant: Five-tier schema privileges for a user or role
    SchemaSpec: Schema with owner and grants
    DatabaseSpec: Database with creation options, extensions, grants, schemas
    DesiredState: Root aggregate (document keys: users, databases)
    UserSubject, RoleSubject, Subject: Grant subject variants
    normalise_privileges: Privilege token normalisation
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from exceptions import InvalidGrant


# Privilege tokens are emitted as SQL keywords, never quoted
PRIVILEGE_PATTERN = re.compile(r"^[A-Z][A-Z ]*$")

NEITHER_SUBJECT_MESSAGE = "schema grant must specify either user or role"
BOTH_SUBJECTS_MESSAGE = "schema grant must specify either user or role, not both"


def normalise_privileges(values: List[str]) -> List[str]:
    """
    Upper-case privilege tokens and collapse inner whitespace.

    Raises:
        ValueError: token is not a bare SQL keyword (e.g. contains ';' or quotes)
    """
    normalised = []
    for value in values:
        token = " ".join(str(value).split()).upper()
        if not PRIVILEGE_PATTERN.match(token):
            raise ValueError(f"invalid privilege token {value!r}")
        normalised.append(token)
    return normalised


# ============================================================================
# GRANT SUBJECTS
# ============================================================================

@dataclass(frozen=True)
class UserSubject:
    """Grant conferred on a login user."""
    name: str

    @property
    def kind(self) -> str:
        return "user"


@dataclass(frozen=True)
class RoleSubject:
    """Grant conferred on a group role."""
    name: str

    @property
    def kind(self) -> str:
        return "role"


Subject = Union[UserSubject, RoleSubject]


class _SpecModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)


# ============================================================================
# ROLES
# ============================================================================

class RoleSpec(_SpecModel):
    """
    A role to ensure exists.

    Attributes:
        name: Role name (unique across the document)
        password_env: Secret reference; key looked up in the secrets mapping
        can_login: Create WITH LOGIN PASSWORD; requires a resolved password
        owns_schemas: Informational only, never acted on
        roles: Role memberships granted on every run (GRANT member TO name)
        password: Resolved secret, never serialised
    """

    name: str = Field(..., min_length=1)
    password_env: Optional[str] = Field(default=None, min_length=1)
    can_login: bool = False
    owns_schemas: List[str] = Field(default_factory=list)
    roles: List[str] = Field(default_factory=list)
    password: Optional[str] = Field(default=None, repr=False, exclude=True)

    @field_validator("owns_schemas", "roles", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value


# ============================================================================
# DATABASES
# ============================================================================

class DatabaseGrant(_SpecModel):
    """GRANT privileges ON DATABASE to a role. Applied every run."""

    user: str = Field(..., min_length=1)
    privileges: List[str] = Field(default_factory=list)

    @field_validator("privileges", mode="before")
    @classmethod
    def _normalise(cls, value):
        return normalise_privileges(value or [])


class SchemaGrant(_SpecModel):
    """
    Schema access for exactly one subject, across five privilege tiers.

    The subject is validated when the grant is applied, not when the
    document is loaded; see subject().
    """

    user: Optional[str] = None
    role: Optional[str] = None
    privileges: List[str] = Field(default_factory=list)
    table_privileges: List[str] = Field(default_factory=list)
    sequence_privileges: List[str] = Field(default_factory=list)
    function_privileges: List[str] = Field(default_factory=list)
    default_privileges: List[str] = Field(default_factory=list)

    @field_validator(
        "privileges",
        "table_privileges",
        "sequence_privileges",
        "function_privileges",
        "default_privileges",
        mode="before",
    )
    @classmethod
    def _normalise(cls, value):
        return normalise_privileges(value or [])

    @field_validator("user", "role", mode="after")
    @classmethod
    def _blank_as_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    def subject(self) -> Subject:
        """
        Resolve the grant subject.

        Raises:
            InvalidGrant: neither or both of user/role are set
        """
        if self.user and self.role:
            raise InvalidGrant(BOTH_SUBJECTS_MESSAGE)
        if self.user:
            return UserSubject(self.user)
        if self.role:
            return RoleSubject(self.role)
        raise InvalidGrant(NEITHER_SUBJECT_MESSAGE)


class SchemaSpec(_SpecModel):
    """A schema inside one database."""

    name: str = Field(..., min_length=1)
    owner: str = Field(..., min_length=1)
    grants: List[SchemaGrant] = Field(default_factory=list)


class DatabaseSpec(_SpecModel):
    """
    A database to ensure exists.

    Optional creation clauses are only rendered when set. Extensions and
    schemas are applied over a connection scoped to this database.
    """

    name: str = Field(..., min_length=1)
    owner: Optional[str] = None
    encoding: Optional[str] = None
    lc_collate: Optional[str] = None
    lc_ctype: Optional[str] = None
    template: Optional[str] = None
    extensions: List[str] = Field(default_factory=list)
    grants: List[DatabaseGrant] = Field(default_factory=list)
    schemas: List[SchemaSpec] = Field(default_factory=list)

    @field_validator("owner", "encoding", "lc_collate", "lc_ctype", "template", mode="after")
    @classmethod
    def _blank_as_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @field_validator("extensions", "grants", "schemas", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    @model_validator(mode="after")
    def _unique_schemas(self) -> "DatabaseSpec":
        _reject_duplicates([s.name for s in self.schemas], f"schema in database '{self.name}'")
        return self


# ============================================================================
# ROOT AGGREGATE
# ============================================================================

class DesiredState(_SpecModel):
    """
    Root of the bootstrap document.

    Roles are read from the document key 'users' only; the 'roles' field name
    is not accepted as input, in documents or in code.
    """

    model_config = ConfigDict(
        frozen=True, extra="forbid", str_strip_whitespace=True
    )

    roles: List[RoleSpec] = Field(default_factory=list, alias="users")
    databases: List[DatabaseSpec] = Field(default_factory=list)

    @field_validator("roles", "databases", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    @model_validator(mode="after")
    def _unique_names(self) -> "DesiredState":
        _reject_duplicates([r.name for r in self.roles], "role")
        _reject_duplicates([d.name for d in self.databases], "database")
        return self

    @property
    def is_empty(self) -> bool:
        return not self.roles and not self.databases


def _reject_duplicates(names: List[str], what: str) -> None:
    seen = set()
    for name in names:
        if name in seen:
            raise ValueError(f"duplicate {what} name '{name}'")
        seen.add(name)
