"""
Unified Logger System.

JSON-only structured logging for the bootstrap pipeline.

Design Principles:
    - Strong typing with dataclasses (stdlib only)
    - Enum safety for categories
    - Component-specific loggers
    - Clean factory pattern

Exports:
    ComponentType: Enum for component types
    LogLevel: Enum for log levels
    LogContext: Logging context dataclass
    ComponentConfig: Per-component logger settings
    JSONFormatter: One JSON object per log line
    LoggerFactory: Factory for creating loggers
    configure_root_level: Apply a run-wide log level to every component logger
    log_exceptions: Exception logging decorator

Dependencies:
    Standard library only (logging, enum, dataclasses, json)
"""

from enum import Enum
from typing import Optional, Dict, Any
from datetime import datetime, timezone
from dataclasses import dataclass
import logging
import sys
import os
import json
import traceback
from functools import wraps


# ============================================================================
# COMPONENT TYPES - Layers of the bootstrap pipeline
# ============================================================================

class ComponentType(Enum):
    """
    Component types aligned with the bootstrap pipeline layers.

    Each layer has specific logging needs and levels.
    """
    CLI = "cli"                  # Process entry point
    SERVICE = "service"          # Orchestration (DatabaseBootstrapper)
    PROVISIONER = "provisioner"  # Per-object-kind reconcilers
    REPOSITORY = "repository"    # Database access layer
    LOADER = "loader"            # Desired-state document loading


# ============================================================================
# LOG LEVELS - Standard Python levels with enum safety
# ============================================================================

class LogLevel(Enum):
    """
    Standard Python log levels as enum for type safety.
    """
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def to_python_level(self) -> int:
        """Convert to Python logging level constant."""
        return getattr(logging, self.value)

    @classmethod
    def from_string(cls, level: str) -> 'LogLevel':
        """Create from string, case-insensitive."""
        return cls[level.upper()]


# ============================================================================
# LOG CONTEXT - Correlation across stages
# ============================================================================

@dataclass
class LogContext:
    """
    Context attached to every record a logger emits.

    Bound once per logger name, so it only carries values that are fixed for
    that name (a provisioner always runs the same stage).
    """
    stage: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            k: v for k, v in {
                'stage': self.stage,
            }.items() if v is not None
        }


# ============================================================================
# COMPONENT CONFIGURATION - Per-component settings
# ============================================================================

@dataclass
class ComponentConfig:
    """
    Configuration for component-specific logging.

    Each component type can have different settings.
    """
    component_type: ComponentType
    log_level: LogLevel = LogLevel.INFO


# ============================================================================
# JSON FORMATTER - Structured logging
# ============================================================================

class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.
    Outputs one JSON document per line so log shippers can parse it directly.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Python LogRecord to format

        Returns:
            JSON string with structured log data
        """
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name,
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if hasattr(record, 'custom_dimensions'):
            log_obj['customDimensions'] = record.custom_dimensions

        if record.exc_info:
            log_obj['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': self.formatException(record.exc_info) if record.exc_info else None
            }

        return json.dumps(log_obj, default=str)


# ============================================================================
# LOGGER FACTORY - Creates component-specific loggers
# ============================================================================

class LoggerFactory:
    """
    Factory for creating component-specific loggers.

    This factory creates Python loggers configured for each
    component type with appropriate settings and context.

    Example:
        logger = LoggerFactory.create_logger(
            ComponentType.PROVISIONER,
            "RoleProvisioner"
        )
        logger.info("Creating role")
    """

    _env_level = os.getenv('LOG_LEVEL', 'INFO').upper()
    _default_level = LogLevel[_env_level] if _env_level in LogLevel.__members__ else LogLevel.INFO

    DEFAULT_CONFIGS = {
        ComponentType.CLI: ComponentConfig(
            component_type=ComponentType.CLI,
            log_level=_default_level
        ),
        ComponentType.SERVICE: ComponentConfig(
            component_type=ComponentType.SERVICE,
            log_level=_default_level
        ),
        ComponentType.PROVISIONER: ComponentConfig(
            component_type=ComponentType.PROVISIONER,
            log_level=_default_level
        ),
        ComponentType.REPOSITORY: ComponentConfig(
            component_type=ComponentType.REPOSITORY,
            log_level=_default_level
        ),
        ComponentType.LOADER: ComponentConfig(
            component_type=ComponentType.LOADER,
            log_level=_default_level
        ),
    }

    # Loggers handed out so far, so a run-wide level change reaches all of them
    _created: Dict[str, logging.Logger] = {}

    @classmethod
    def create_logger(
        cls,
        component_type: ComponentType,
        name: str,
        context: Optional[LogContext] = None,
        config: Optional[ComponentConfig] = None
    ) -> logging.Logger:
        """
        Create a logger for a specific component.

        Args:
            component_type: Type of component
            name: Component name (e.g., "RoleProvisioner")
            context: Optional log context for correlation
            config: Optional custom configuration

        Returns:
            Configured Python logger
        """
        if config is None:
            config = cls.DEFAULT_CONFIGS.get(
                component_type,
                ComponentConfig(component_type=component_type)
            )

        logger_name = f"dbstrap.{component_type.value}.{name}"
        logger = logging.getLogger(logger_name)

        if isinstance(config.log_level, str):
            log_level = LogLevel.from_string(config.log_level).to_python_level()
        else:
            log_level = config.log_level.to_python_level()
        logger.setLevel(log_level)

        # Only one JSON handler per logger, however often create_logger is called
        has_json_handler = any(
            isinstance(h.formatter, JSONFormatter) for h in logger.handlers
        )
        if not has_json_handler:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(JSONFormatter())
            logger.addHandler(handler)

        # Handler above already writes the record
        logger.propagate = False

        if not hasattr(logger, '_context_wrapped'):
            original_log = logger._log

            def log_with_context(level, msg, args, exc_info=None, extra=None, stack_info=False, stacklevel=1):
                """Wrapper to inject context as custom dimensions."""
                if extra is None:
                    extra = {}

                custom_dims = context.to_dict() if context else {}
                custom_dims['component_type'] = component_type.value
                custom_dims['component_name'] = name

                if 'custom_dimensions' in extra:
                    custom_dims.update(extra['custom_dimensions'])

                extra['custom_dimensions'] = custom_dims

                # +1 to account for this wrapper function
                original_log(level, msg, args, exc_info=exc_info, extra=extra,
                             stack_info=stack_info, stacklevel=stacklevel + 1)

            logger._log = log_with_context
            logger._context_wrapped = True

        cls._created[logger_name] = logger
        return logger

    @classmethod
    def create_with_context(
        cls,
        component_type: ComponentType,
        name: str,
        stage: Optional[str] = None
    ) -> logging.Logger:
        """
        Create logger with stage context.

        Args:
            component_type: Type of component
            name: Component name
            stage: Optional stage name

        Returns:
            Configured Python logger with context
        """
        context = LogContext(stage=stage) if stage else None
        return cls.create_logger(
            component_type=component_type,
            name=name,
            context=context
        )

    @classmethod
    def set_level(cls, level: LogLevel) -> None:
        """Apply a level to every default config and every logger created so far."""
        for component_config in cls.DEFAULT_CONFIGS.values():
            component_config.log_level = level
        for logger in cls._created.values():
            logger.setLevel(level.to_python_level())


def configure_root_level(level: str) -> LogLevel:
    """
    Apply a run-wide log level (e.g. from --log-level).

    Raises:
        ValueError: if the level name is unknown
    """
    try:
        resolved = LogLevel.from_string(level)
    except KeyError:
        raise ValueError(
            f"Unknown log level '{level}' (expected one of {', '.join(LogLevel.__members__)})"
        )
    LoggerFactory.set_level(resolved)
    return resolved


# ============================================================================
# EXCEPTION DECORATOR - Automatic exception logging with context
# ============================================================================

def log_exceptions(component_type: Optional[ComponentType] = None,
                   component_name: Optional[str] = None,
                   logger: Optional[logging.Logger] = None):
    """
    Decorator to automatically log exceptions with full context.

    Can be used in three ways:
    1. With existing logger: @log_exceptions(logger=my_logger)
    2. With component info: @log_exceptions(ComponentType.SERVICE, "DatabaseBootstrapper")
    3. Simple: @log_exceptions() - uses function module and name

    The exception is always re-raised.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if logger:
                log = logger
            elif component_type and component_name:
                log = LoggerFactory.create_logger(component_type, component_name)
            else:
                log = LoggerFactory.create_logger(
                    ComponentType.SERVICE,
                    func.__module__ or "unknown"
                )

            try:
                return func(*args, **kwargs)
            except Exception as e:
                log.error(
                    f"Exception in {func.__name__}: {e}",
                    exc_info=True,
                    extra={
                        'custom_dimensions': {
                            'function_name': func.__name__,
                            'function_module': func.__module__,
                            'exception_type': type(e).__name__,
                            'exception_message': str(e),
                            'traceback': traceback.format_exc()
                        }
                    }
                )
                raise
        return wrapper
    return decorator
