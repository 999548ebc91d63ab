"""
Extension Provisioner.

Stage 3, per database. Enables extensions inside the database the session
is connected to. No grants.
"""

from typing import Optional, Sequence

from core.models.commands import CreateExtension
from core.models.enums import Stage
from core.models.results import BootstrapResult
from infrastructure.interface_repository import IAdminSession

from .provisioner_base import BaseProvisioner


class ExtensionProvisioner(BaseProvisioner):
    """Ensures extensions are installed in one database."""

    stage = Stage.EXTENSIONS

    def apply_extensions(self, session: IAdminSession, extensions: Sequence[str]) -> None:
        self._begin(session)
        for name in extensions:
            self._ensure(session, CreateExtension(name=name))


def apply_extensions(
    session: IAdminSession,
    extensions: Sequence[str],
    result: Optional[BootstrapResult] = None,
) -> None:
    ExtensionProvisioner(result).apply_extensions(session, extensions)
