"""
Main Application Configuration.

Composes domain-specific configuration:
    - DatabaseConfig (admin connection; absent for dry runs without DATABASE_URL)
    - run mode, document path and log level

Exports:
    AppConfig: Main configuration class
    env_flag: Truthy environment flag helper

Dependencies:
    pydantic: BaseModel for configuration validation
    config.database_config: DatabaseConfig
    config.defaults: Default value constants

Pattern:
    Composition over inheritance - domain configs are composed, not inherited.
"""

import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from core.models.enums import RunMode
from exceptions import ConfigurationError
from util_logger import LogLevel
from .database_config import DatabaseConfig
from .defaults import BootstrapDefaults


def _normalise_level(value: str) -> str:
    level = value.strip().upper()
    if level not in LogLevel.__members__:
        raise ValueError(f"unknown log level '{value}'")
    return level


def env_flag(name: str) -> bool:
    """True when the variable is set to true, 1 or yes (case-insensitive)."""
    return os.environ.get(name, "").strip().lower() in BootstrapDefaults.TRUTHY_VALUES


# ============================================================================
# APPLICATION CONFIGURATION
# ============================================================================

class AppConfig(BaseModel):
    """
    Application configuration - composition of domain configs.
    """

    database: Optional[DatabaseConfig] = Field(
        default=None,
        description="Admin connection; required for APPLY, unused for DRY_RUN"
    )

    run_mode: RunMode = Field(
        default=RunMode.APPLY,
        description="APPLY executes statements. DRY_RUN logs them without connecting. "
                    "Set BOOTSTRAP_DRY_RUN=true (or BOOTSTRAP_RENDER_ONLY=true) to enable."
    )

    config_path: str = Field(
        default=BootstrapDefaults.CONFIG_PATH,
        description="Path to the YAML desired-state document (BOOTSTRAP_CONFIG)"
    )

    log_level: str = Field(
        default=BootstrapDefaults.LOG_LEVEL,
        description="Logging level (LOG_LEVEL)"
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        return _normalise_level(value)

    @property
    def dry_run(self) -> bool:
        return self.run_mode is RunMode.DRY_RUN

    def require_database(self) -> DatabaseConfig:
        """
        Database config for an APPLY run.

        Raises:
            ConfigurationError: DATABASE_URL was not set
        """
        if self.database is None:
            raise ConfigurationError("DATABASE_URL must be set")
        return self.database

    def with_overrides(
        self,
        dry_run: bool = False,
        config_path: Optional[str] = None,
        log_level: Optional[str] = None,
    ) -> "AppConfig":
        """Apply command-line flags on top of the environment."""
        update = {}
        if dry_run:
            update["run_mode"] = RunMode.DRY_RUN
        if config_path:
            update["config_path"] = config_path
        if log_level:
            update["log_level"] = _normalise_level(log_level)
        return self.model_copy(update=update)

    def debug_dict(self) -> dict:
        return {
            "database": self.database.debug_dict() if self.database else None,
            "run_mode": self.run_mode.value,
            "config_path": self.config_path,
            "log_level": self.log_level,
        }

    @classmethod
    def from_environment(cls) -> "AppConfig":
        """
        Load from environment variables.

        DATABASE_URL is optional here; require_database() enforces it for
        APPLY runs.

        Raises:
            ConfigurationError: malformed value
        """
        dry_run = env_flag("BOOTSTRAP_DRY_RUN") or env_flag("BOOTSTRAP_RENDER_ONLY")
        database = DatabaseConfig.from_environment() if os.environ.get("DATABASE_URL", "").strip() else None

        try:
            return cls(
                database=database,
                run_mode=RunMode.DRY_RUN if dry_run else RunMode.APPLY,
                config_path=os.environ.get("BOOTSTRAP_CONFIG", BootstrapDefaults.CONFIG_PATH),
                log_level=os.environ.get("LOG_LEVEL", BootstrapDefaults.LOG_LEVEL),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
