# ============================================================================
# CONFIG PACKAGE INIT
# ============================================================================
# STATUS: Configuration - Package exports and singleton
# PURPOSE: Single access point for environment-derived configuration
# EXPORTS: AppConfig, DatabaseConfig, get_config, reset_config, debug_config
# ============================================================================

"""
Configuration Package - Domain-Specific Configuration Modules

Structure:
    config/
    ├── __init__.py              # This file - exports and singleton
    ├── app_config.py            # Main config (run mode, paths, log level)
    ├── database_config.py       # Admin PostgreSQL connection
    ├── defaults.py              # Default values
    └── env_validation.py        # Fail-fast environment validation

Usage:
    # Singleton pattern (preferred)
    from config import get_config
    config = get_config()
    provider = PostgreSQLConnectionProvider(config.require_database())

    # Debug output
    from config import debug_config
    info = debug_config()  # Passwords masked
"""

from typing import Optional

from .database_config import DatabaseConfig
from .app_config import AppConfig, env_flag
from .defaults import BootstrapDefaults, DatabaseDefaults


# ============================================================================
# SINGLETON PATTERN
# ============================================================================

_config_instance: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get global configuration singleton.

    Returns:
        AppConfig instance loaded from environment
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = AppConfig.from_environment()
    return _config_instance


def reset_config() -> None:
    """Drop the cached singleton (tests change the environment between cases)."""
    global _config_instance
    _config_instance = None


def debug_config() -> dict:
    """
    Get sanitized configuration for debugging (masks sensitive values).

    Usage:
        info = debug_config()
        print(info['database']['password'])  # Shows "***MASKED***"
    """
    try:
        return get_config().debug_dict()
    except Exception as e:
        return {'error': f'Configuration validation failed: {e}'}


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    'AppConfig',
    'DatabaseConfig',
    'BootstrapDefaults',
    'DatabaseDefaults',
    'env_flag',
    'get_config',
    'reset_config',
    'debug_config',
]
