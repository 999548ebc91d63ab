"""
Database Provisioner.

Stage 2. Creates missing databases with only the creation options that are
set, then applies database-level grants. Runs on the default-database
session; roles named as owners or grantees must already exist.

Exports:
    DatabaseProvisioner: Stage provisioner class
    apply_databases: Functional entry point
"""

from typing import Optional, Sequence

from core.models.commands import CreateDatabase, GrantDatabasePrivileges
from core.models.desired_state import DatabaseSpec
from core.models.enums import Stage
from core.models.results import BootstrapResult
from infrastructure.interface_repository import IAdminSession

from .provisioner_base import BaseProvisioner


class DatabaseProvisioner(BaseProvisioner):
    """Ensures databases exist and applies their grants."""

    stage = Stage.DATABASES

    def apply_databases(self, session: IAdminSession, databases: Sequence[DatabaseSpec]) -> None:
        """
        Apply databases in input order.

        Grants are applied unconditionally; a grant with no privileges
        emits nothing.
        """
        self._begin(session)

        for database in databases:
            self._ensure(session, CreateDatabase(
                name=database.name,
                owner=database.owner,
                encoding=database.encoding,
                lc_collate=database.lc_collate,
                lc_ctype=database.lc_ctype,
                template=database.template,
            ))

            for grant in database.grants:
                if not grant.privileges:
                    self.logger.debug(f"Grant for '{grant.user}' on '{database.name}' has no privileges")
                    continue
                self._grant(
                    session,
                    GrantDatabasePrivileges(
                        database=database.name,
                        grantee=grant.user,
                        privileges=tuple(grant.privileges),
                    ),
                    subject=grant.user,
                )


def apply_databases(
    session: IAdminSession,
    databases: Sequence[DatabaseSpec],
    result: Optional[BootstrapResult] = None,
) -> None:
    DatabaseProvisioner(result).apply_databases(session, databases)
