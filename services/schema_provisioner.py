"""
Schema Provisioner.

Stage 4, per database. Creates missing schemas with their owner and applies
schema grants across five independent privilege tiers:

    SCHEMA     GRANT ... ON SCHEMA s TO subject
    TABLES     GRANT ... ON ALL TABLES IN SCHEMA s TO subject
    SEQUENCES  GRANT ... ON ALL SEQUENCES IN SCHEMA s TO subject
    FUNCTIONS  GRANT ... ON ALL FUNCTIONS IN SCHEMA s TO subject
    DEFAULT    ALTER DEFAULT PRIVILEGES FOR ROLE owner IN SCHEMA s
               GRANT ... ON TABLES TO subject

An empty tier emits nothing.

Exports:
    SchemaProvisioner: Stage provisioner class
    apply_schemas: Functional entry point
"""

from typing import List, Optional, Sequence, Tuple

from core.models.commands import CreateSchema, GrantSchemaPrivileges
from core.models.desired_state import SchemaGrant, SchemaSpec, Subject
from core.models.enums import GrantTier, ObjectKind, Stage
from core.models.results import BootstrapResult
from exceptions import InvalidGrant
from infrastructure.interface_repository import IAdminSession

from .provisioner_base import BaseProvisioner


def _tiers(grant: SchemaGrant) -> List[Tuple[GrantTier, List[str]]]:
    return [
        (GrantTier.SCHEMA, grant.privileges),
        (GrantTier.TABLES, grant.table_privileges),
        (GrantTier.SEQUENCES, grant.sequence_privileges),
        (GrantTier.FUNCTIONS, grant.function_privileges),
        (GrantTier.DEFAULT, grant.default_privileges),
    ]


class SchemaProvisioner(BaseProvisioner):
    """Ensures schemas exist in one database and applies their grants."""

    stage = Stage.SCHEMAS

    def apply_schemas(self, session: IAdminSession, schemas: Sequence[SchemaSpec]) -> None:
        """
        Apply schemas in input order.

        Raises:
            InvalidGrant: a grant has no subject, or both user and role;
                no statement is issued for that schema, not even CREATE SCHEMA
            ExistenceCheckFailure, CreationFailure, GrantFailure: first failing step
        """
        self._begin(session)

        for schema in schemas:
            subjects = self._subjects(schema)
            self._ensure(session, CreateSchema(name=schema.name, owner=schema.owner))

            for grant, subject in zip(schema.grants, subjects):
                for tier, privileges in _tiers(grant):
                    if not privileges:
                        continue
                    self._grant(
                        session,
                        GrantSchemaPrivileges(
                            schema=schema.name,
                            subject=subject,
                            tier=tier,
                            privileges=tuple(privileges),
                            owner=schema.owner,
                        ),
                        subject=subject.name,
                    )

    def _subjects(self, schema: SchemaSpec) -> List[Subject]:
        """Resolve every grant subject of a schema before anything is issued for it."""
        subjects = []
        for grant in schema.grants:
            try:
                subjects.append(grant.subject())
            except InvalidGrant as e:
                error = InvalidGrant(
                    e.message,
                    stage=self.stage.value,
                    object_kind=ObjectKind.SCHEMA.value,
                    object_name=schema.name,
                )
                self._fail(error)
                raise error from e
        return subjects


def apply_schemas(
    session: IAdminSession,
    schemas: Sequence[SchemaSpec],
    result: Optional[BootstrapResult] = None,
) -> None:
    SchemaProvisioner(result).apply_schemas(session, schemas)
