# ============================================================================
# PROVISIONER BASE
# ============================================================================
# STATUS: Service - Shared existence-guarded creation and grant helpers
# PURPOSE: One place where driver errors become BootstrapErrors carrying the
#          stage, object and subject being processed
# ============================================================================
"""
Provisioner Base Class.

Every provisioner follows the same shape for each object:

    1. _exists()  -> catalog lookup (ExistenceCheckFailure on error)
    2. _ensure()  -> CREATE only when absent (CreationFailure on error)
    3. _grant()   -> ACL statements every run (GrantFailure on error)

The first error aborts the stage. Nothing is retried and nothing already
applied is rolled back; re-running is the recovery path.

Exports:
    BaseProvisioner: Abstract base for the four stage provisioners
"""

from abc import ABC
from typing import Optional

from core.models.commands import Command
from core.models.enums import ObjectKind, Stage
from core.models.results import BootstrapResult, StepResult
from core.schema.sql_renderer import SQLRenderer
from exceptions import BootstrapError, CreationFailure, ExistenceCheckFailure, GrantFailure
from infrastructure.interface_repository import IAdminSession
from util_logger import ComponentType, LoggerFactory


class BaseProvisioner(ABC):
    """
    Shared behaviour for stage provisioners.

    Args:
        result: Run result to record into; a private one is created when
            the provisioner is used on its own
    """

    stage: Stage

    def __init__(self, result: Optional[BootstrapResult] = None):
        self.result = result if result is not None else BootstrapResult()
        self.logger = LoggerFactory.create_with_context(
            ComponentType.PROVISIONER, type(self).__name__, stage=self.stage.value
        )
        self._step: Optional[StepResult] = None

    def _begin(self, session: IAdminSession) -> StepResult:
        self._step = self.result.begin(self.stage.value, database=session.database)
        return self._step

    def _fail(self, error: BootstrapError) -> None:
        if self._step is not None:
            self._step.status = "failed"
            self._step.error = str(error)

    def _exists(self, session: IAdminSession, kind: ObjectKind, name: str) -> bool:
        try:
            return session.object_exists(kind, name)
        except BootstrapError:
            raise
        except Exception as e:
            error = ExistenceCheckFailure(
                f"failed to check if {kind.value} exists: {e}",
                stage=self.stage.value,
                object_kind=kind.value,
                object_name=name,
            )
            self._fail(error)
            raise error from e

    def _ensure(self, session: IAdminSession, command: Command) -> bool:
        """
        Create the command's object unless it already exists.

        Returns:
            True if created, False if it was already present
        """
        kind, name = command.object_kind, command.object_name

        if self._exists(session, kind, name):
            self.logger.info(f"⏭️ {kind.value.capitalize()} '{name}' already exists")
            if self._step is not None:
                self._step.existing.append(name)
            return False

        self.logger.info(f"🔨 Creating {kind.value} '{name}'")
        try:
            session.execute_ddl(command)
        except BootstrapError:
            raise
        except Exception as e:
            error = CreationFailure(
                f"failed to create {kind.value}: {e}",
                stage=self.stage.value,
                object_kind=kind.value,
                object_name=name,
            )
            self._fail(error)
            raise error from e

        self.logger.info(f"✅ Created {kind.value} '{name}'")
        if self._step is not None:
            self._step.created.append(name)
        return True

    def _grant(self, session: IAdminSession, command: Command, subject: str) -> None:
        kind, name = command.object_kind, command.object_name
        self.logger.info(
            f"🔑 {SQLRenderer.to_text(command)}",
            extra={'custom_dimensions': {'object_name': name, 'subject': subject}}
        )
        try:
            session.execute_grant(command)
        except BootstrapError:
            raise
        except Exception as e:
            error = GrantFailure(
                f"failed to grant privileges to '{subject}': {e}",
                stage=self.stage.value,
                object_kind=kind.value,
                object_name=name,
                subject=subject,
            )
            self._fail(error)
            raise error from e

        if self._step is not None:
            self._step.grants += 1
