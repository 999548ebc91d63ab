"""
Role Provisioner.

Stage 1. Creates missing roles and grants role memberships. Existing roles
are never altered (no password or attribute drift correction).

Exports:
    RoleProvisioner: Stage provisioner class
    apply_roles: Functional entry point
"""

from typing import Optional, Sequence

from core.models.commands import CreateRole, GrantRoleMembership
from core.models.desired_state import RoleSpec
from core.models.enums import ObjectKind, Stage
from core.models.results import BootstrapResult
from exceptions import MissingCredential
from infrastructure.interface_repository import IAdminSession

from .provisioner_base import BaseProvisioner


class RoleProvisioner(BaseProvisioner):
    """Ensures roles exist and carry their memberships."""

    stage = Stage.ROLES

    def apply_roles(self, session: IAdminSession, roles: Sequence[RoleSpec]) -> None:
        """
        Apply roles in input order.

        Memberships are granted on every run whether or not the role was
        just created.

        Raises:
            MissingCredential: login role without a resolved password
            ExistenceCheckFailure, CreationFailure, GrantFailure: first failing step
        """
        self._begin(session)

        for role in roles:
            if role.can_login and not role.password:
                error = MissingCredential(
                    "login role has no resolved password",
                    stage=self.stage.value,
                    object_kind=ObjectKind.ROLE.value,
                    object_name=role.name,
                )
                self._fail(error)
                raise error

            self._ensure(
                session,
                CreateRole(name=role.name, login=role.can_login, password=role.password if role.can_login else None),
            )

            for member_of in role.roles:
                self._grant(session, GrantRoleMembership(role=role.name, member_of=member_of), subject=role.name)


def apply_roles(
    session: IAdminSession,
    roles: Sequence[RoleSpec],
    result: Optional[BootstrapResult] = None,
) -> None:
    RoleProvisioner(result).apply_roles(session, roles)
