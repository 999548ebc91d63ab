# ============================================================================
# BOOTSTRAP SERVICE
# ============================================================================
# STATUS: Service - Stage orchestration
# PURPOSE: Run the four provisioners in dependency order against one cluster
# EXPORTS: DatabaseBootstrapper, BootstrapSettings
# ============================================================================
"""
Database Bootstrapper.

Reconciles a DesiredState against a cluster in four stages:

    1. roles       (default-database session)
    2. databases   (default-database session)
    3. extensions  (one session per database)
    4. schemas     (same per-database session as 3)

Each stage only depends on objects created by the stages before it: owners
exist before databases, databases exist before anything connects to them.

Secrets are resolved before any session is opened, so a missing credential
fails the run without touching the server. The first error aborts the run;
objects created before it stay in place and a re-run picks up from there.

Usage:
    from services.bootstrap_service import DatabaseBootstrapper, BootstrapSettings

    bootstrapper = DatabaseBootstrapper(
        PostgreSQLConnectionProvider(config.database),
        BootstrapSettings(secrets=collect_secrets(state, os.environ)),
    )
    result = bootstrapper.run(state)
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Mapping, Optional

from core.desired_state_loader import resolve_secrets
from core.models.desired_state import DesiredState
from core.models.enums import RunMode, Stage
from core.models.results import BootstrapResult
from exceptions import BootstrapError, ConfigurationError, ConnectionFailure
from infrastructure.interface_repository import IAdminSession, IConnectionProvider
from infrastructure.recording import RecordingConnectionProvider
from util_logger import ComponentType, LoggerFactory, log_exceptions

from .registry import get_provisioner

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "DatabaseBootstrapper")


@dataclass(frozen=True)
class BootstrapSettings:
    """
    Explicit inputs the engine would otherwise read from the environment.

    Attributes:
        secrets: password_env key -> plaintext credential
        run_mode: APPLY executes; DRY_RUN records commands without connecting
    """
    secrets: Mapping[str, str] = field(default_factory=dict, repr=False)
    run_mode: RunMode = RunMode.APPLY


class DatabaseBootstrapper:
    """
    Stage orchestrator.

    Args:
        provider: Connection provider for APPLY runs; ignored for DRY_RUN,
            which always uses an offline RecordingConnectionProvider
        settings: Secrets and run mode

    Attributes:
        result: Result of the most recent run (also set when it failed)
    """

    def __init__(
        self,
        provider: Optional[IConnectionProvider] = None,
        settings: Optional[BootstrapSettings] = None,
    ):
        self.settings = settings or BootstrapSettings()

        if self.settings.run_mode is RunMode.DRY_RUN:
            self.provider: IConnectionProvider = RecordingConnectionProvider()
        elif provider is None:
            raise ConfigurationError("APPLY mode requires a connection provider")
        else:
            self.provider = provider

        self.result: Optional[BootstrapResult] = None

    @contextmanager
    def _session(self, stage: Stage, database: Optional[str] = None) -> Iterator[IAdminSession]:
        try:
            with self.provider.session(database) as session:
                yield session
        except ConnectionFailure as e:
            if e.stage is not None:
                raise
            raise ConnectionFailure(
                e.message,
                stage=stage.value,
                object_kind=e.object_kind,
                object_name=e.object_name,
            ) from e.__cause__

    @log_exceptions(logger=logger)
    def run(self, state: DesiredState) -> BootstrapResult:
        """
        Reconcile the cluster with the desired state.

        Returns:
            BootstrapResult with success=True

        Raises:
            BootstrapError: first failure; self.result holds the partial result
        """
        result = BootstrapResult(run_mode=self.settings.run_mode)
        self.result = result
        dry_run = self.settings.run_mode is RunMode.DRY_RUN

        if dry_run:
            # Fresh offline catalog per run: everything is absent
            self.provider = RecordingConnectionProvider()
            logger.info("🧪 DRY RUN MODE - No changes will be made")

        try:
            state = resolve_secrets(state, self.settings.secrets)
            self._run_stages(state, result)
        except BootstrapError as e:
            result.error = e.to_dict()
            raise
        finally:
            self._collect_commands(result)

        result.success = True
        logger.info(
            f"✅ Bootstrap executed successfully "
            f"({result.created_count} created, {result.grant_count} grants)",
            extra={'custom_dimensions': {'summary': result.to_dict()['summary']}}
        )
        return result

    def _run_stages(self, state: DesiredState, result: BootstrapResult) -> None:
        # Stage 1: roles
        if state.roles:
            logger.info(f"Starting role creation ({len(state.roles)} roles)")
            with self._session(Stage.ROLES) as session:
                get_provisioner(Stage.ROLES)(result).apply_roles(session, state.roles)
        else:
            result.skip(Stage.ROLES.value, message="no roles in desired state")

        # Stage 2: databases
        if state.databases:
            logger.info(f"Starting database creation ({len(state.databases)} databases)")
            with self._session(Stage.DATABASES) as session:
                get_provisioner(Stage.DATABASES)(result).apply_databases(session, state.databases)
        else:
            result.skip(Stage.DATABASES.value, message="no databases in desired state")

        # Stages 3 and 4: one connection per database
        for database in state.databases:
            if not database.extensions and not database.schemas:
                result.skip(Stage.EXTENSIONS.value, database=database.name, message="nothing to apply")
                continue

            logger.info(f"Processing database '{database.name}'")
            stage = Stage.EXTENSIONS if database.extensions else Stage.SCHEMAS
            with self._session(stage, database.name) as session:
                if database.extensions:
                    get_provisioner(Stage.EXTENSIONS)(result).apply_extensions(session, database.extensions)
                if database.schemas:
                    get_provisioner(Stage.SCHEMAS)(result).apply_schemas(session, database.schemas)

    def _collect_commands(self, result: BootstrapResult) -> None:
        if self.settings.run_mode is not RunMode.DRY_RUN:
            return
        result.commands = [recorded.to_dict() for recorded in self.provider.commands]
        for recorded in self.provider.commands:
            logger.info(f"[dry-run] {recorded.database or '<default>'}: {recorded.sql}")
