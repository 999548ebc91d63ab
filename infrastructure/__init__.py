"""
Infrastructure Package - Lazy Loading Implementation.

Provides the admin session implementations with lazy loading so that
importing the package does not import the database driver or read any
configuration until a class is actually used.

Why lazy loading here:
    - A dry run never connects, so it should not need to import psycopg's
      connection machinery just because services import this package
    - Tests that only use RecordingConnectionProvider stay driver-free
    - DatabaseConfig is only built when a live provider is requested

How it works:
    - __getattr__ intercepts access to the exported classes
    - The actual import happens ONLY when the class is first used
"""

from typing import TYPE_CHECKING

# For type checking only - doesn't actually import at runtime
if TYPE_CHECKING:
    from .interface_repository import (
        IAdminSession as _IAdminSession,
        IConnectionProvider as _IConnectionProvider,
    )
    from .postgresql import (
        PostgreSQLAdminSession as _PostgreSQLAdminSession,
        PostgreSQLConnectionProvider as _PostgreSQLConnectionProvider,
    )
    from .recording import (
        RecordedCommand as _RecordedCommand,
        RecordingSession as _RecordingSession,
        RecordingConnectionProvider as _RecordingConnectionProvider,
    )


def __getattr__(name: str):
    """
    Lazy import mechanism - only imports when actually accessed.
    This prevents module-level code execution until needed.
    """
    # Interfaces
    if name == "IAdminSession":
        from .interface_repository import IAdminSession
        return IAdminSession
    elif name == "IConnectionProvider":
        from .interface_repository import IConnectionProvider
        return IConnectionProvider

    # Live PostgreSQL
    elif name == "PostgreSQLAdminSession":
        from .postgresql import PostgreSQLAdminSession
        return PostgreSQLAdminSession
    elif name == "PostgreSQLConnectionProvider":
        from .postgresql import PostgreSQLConnectionProvider
        return PostgreSQLConnectionProvider

    # Offline recording (dry run / tests)
    elif name == "RecordedCommand":
        from .recording import RecordedCommand
        return RecordedCommand
    elif name == "RecordingSession":
        from .recording import RecordingSession
        return RecordingSession
    elif name == "RecordingConnectionProvider":
        from .recording import RecordingConnectionProvider
        return RecordingConnectionProvider

    raise AttributeError(f"module 'infrastructure' has no attribute '{name}'")


__all__ = [
    "IAdminSession",
    "IConnectionProvider",
    "PostgreSQLAdminSession",
    "PostgreSQLConnectionProvider",
    "RecordedCommand",
    "RecordingSession",
    "RecordingConnectionProvider",
]
