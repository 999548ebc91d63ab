# ============================================================================
# EXCEPTIONS
# ============================================================================
# STATUS: Shared - used by every layer of the bootstrap pipeline
# PURPOSE: Exception hierarchy separating reconciliation failures (carry the
#          stage and object being processed) from configuration errors
# EXPORTS: BootstrapError, ConnectionFailure, ExistenceCheckFailure,
#          CreationFailure, GrantFailure, MissingCredential, InvalidGrant,
#          DesiredStateError, ConfigurationError
# DEPENDENCIES: None (standard library only)
# ============================================================================

"""
Custom Exception Hierarchy

Distinguishes between:
1. Reconciliation failures (BootstrapError and subclasses) raised while the
   desired state is being loaded or applied. Each one names the stage and
   the object that was being processed so the operator can fix the cause
   and re-run.
2. Configuration errors (environment misconfiguration that prevents the
   process from starting at all).

Nothing here is retried. The first error aborts the run.
"""

from typing import Any, Dict, Optional


class BootstrapError(Exception):
    """
    Base class for failures while loading or applying a desired state.

    Attributes:
        stage: Pipeline stage that failed ("roles", "databases",
               "extensions", "schemas", "secrets" or "load")
        object_kind: Kind of object being processed (role, database, ...)
        object_name: Name of the object being processed
    """

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        object_kind: Optional[str] = None,
        object_name: Optional[str] = None,
    ):
        self.message = message
        self.stage = stage
        self.object_kind = object_kind
        self.object_name = object_name
        super().__init__(self._format())

    def _format(self) -> str:
        prefix = []
        if self.stage:
            prefix.append(f"[{self.stage}]")
        if self.object_kind and self.object_name:
            prefix.append(f"{self.object_kind} '{self.object_name}':")
        return " ".join(prefix + [self.message])

    def to_dict(self) -> Dict[str, Any]:
        """Structured form for logging."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "stage": self.stage,
            "object_kind": self.object_kind,
            "object_name": self.object_name,
        }


class ConnectionFailure(BootstrapError):
    """
    Cannot reach the database.

    Examples:
        - Server not listening
        - Authentication rejected
        - Target database for a per-database stage does not exist
    """
    pass


class ExistenceCheckFailure(BootstrapError):
    """
    Catalog query (pg_roles, pg_database, pg_extension, pg_namespace) failed.
    """
    pass


class CreationFailure(BootstrapError):
    """
    DDL execution failed for an absent object.

    Examples:
        - CREATE DATABASE with an owner role that does not exist
        - CREATE EXTENSION for an extension not installed on the server
    """
    pass


class GrantFailure(BootstrapError):
    """
    ACL statement failed.

    Attributes:
        subject: Principal the grant was conferring privileges on
    """

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        object_kind: Optional[str] = None,
        object_name: Optional[str] = None,
        subject: Optional[str] = None,
    ):
        self.subject = subject
        super().__init__(message, stage=stage, object_kind=object_kind, object_name=object_name)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["subject"] = self.subject
        return data


class MissingCredential(BootstrapError):
    """
    Login role without a resolved secret, or a secret reference that
    resolves to nothing.
    """
    pass


class InvalidGrant(BootstrapError):
    """
    Schema grant with no subject, or with both user and role set.
    """
    pass


class DesiredStateError(BootstrapError):
    """
    Desired-state document cannot be read, parsed or validated.
    """
    pass


class ConfigurationError(Exception):
    """
    System configuration error.

    These are fatal and indicate misconfiguration that prevents the
    process from operating.

    Examples:
        - DATABASE_URL not set
        - Unknown run mode or log level
    """
    pass
