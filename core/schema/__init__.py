"""
Core SQL Rendering Package.

Renders command values to psycopg.sql composables.

Exports:
    SQLRenderer: Command value -> sql.Composed / log-safe text
"""

from .sql_renderer import SQLRenderer

__all__ = [
    'SQLRenderer',
]
