"""
Configuration Defaults - Single source of truth for all default values.

Organization:
    - DatabaseDefaults: Connection and timeout defaults for the admin connection
    - BootstrapDefaults: Run mode, document path and log level defaults

There are no tenant-specific defaults: DATABASE_URL has no fallback and must
be set for an apply run.

Usage:
    from config.defaults import DatabaseDefaults

    # In Pydantic Field definitions:
    connect_timeout_seconds: int = Field(default=DatabaseDefaults.CONNECT_TIMEOUT_SECONDS, ...)
"""


# =============================================================================
# DATABASE DEFAULTS
# =============================================================================

class DatabaseDefaults:
    """
    Administrative connection defaults.

    The admin connection targets the maintenance database named in
    DATABASE_URL; per-database stages swap only the dbname.
    """

    PORT = 5432
    CONNECT_TIMEOUT_SECONDS = 10

    # None = no statement_timeout sent to the server
    STATEMENT_TIMEOUT_MS = None

    # Used when DATABASE_URL names no database
    MAINTENANCE_DATABASE = "postgres"

    APPLICATION_NAME = "dbstrap"


# =============================================================================
# BOOTSTRAP DEFAULTS
# =============================================================================

class BootstrapDefaults:
    """Run-level defaults for the CLI and the bootstrapper."""

    CONFIG_PATH = "bootstrap.yaml"
    LOG_LEVEL = "INFO"

    # Values accepted as "on" for BOOTSTRAP_DRY_RUN / BOOTSTRAP_RENDER_ONLY
    TRUTHY_VALUES = ("true", "1", "yes")
