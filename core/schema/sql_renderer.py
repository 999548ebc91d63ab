# ============================================================================
# SQL RENDERER - COMMAND VALUES TO psycopg.sql
# ============================================================================
# STATUS: Core - Final rendering step for every administrative statement
# PURPOSE: Turn command values into sql.Composed for execution, or into
#          log-safe text with the password redacted
# ============================================================================
"""
SQL Renderer.

All methods return psycopg.sql.Composed objects for safe execution.
No string concatenation - full SQL composition for injection safety:

    - object and role names  -> sql.Identifier (always double-quoted)
    - encodings, locales and passwords -> sql.Literal
    - privilege tokens -> sql.SQL (validated as bare keywords at load time)

Usage:
    from core.schema.sql_renderer import SQLRenderer

    stmt = SQLRenderer.render(CreateSchema(name="app", owner="app_owner"))
    cursor.execute(stmt)

    logger.info(SQLRenderer.to_text(command))  # password shown as '***'
"""

from typing import Sequence

from psycopg import sql

from core.models.commands import (
    Command,
    CreateDatabase,
    CreateExtension,
    CreateRole,
    CreateSchema,
    GrantDatabasePrivileges,
    GrantRoleMembership,
    GrantSchemaPrivileges,
)
from core.models.enums import GrantTier

REDACTED_PASSWORD = sql.SQL("'***'")

# ON clause per tier; DEFAULT is rendered separately
_TIER_TARGETS = {
    GrantTier.SCHEMA: "SCHEMA",
    GrantTier.TABLES: "ALL TABLES IN SCHEMA",
    GrantTier.SEQUENCES: "ALL SEQUENCES IN SCHEMA",
    GrantTier.FUNCTIONS: "ALL FUNCTIONS IN SCHEMA",
}


def _privilege_list(privileges: Sequence[str]) -> sql.Composed:
    return sql.SQL(", ").join(sql.SQL(p) for p in privileges)


class SQLRenderer:
    """
    Renders command values to SQL.

    All methods are static. render() dispatches on the command type.

    Example:
        SQLRenderer.to_text(CreateDatabase(name="app_db", owner="app_owner"))
        # 'CREATE DATABASE "app_db" OWNER "app_owner"'
    """

    @staticmethod
    def render(command: Command, redact: bool = False) -> sql.Composed:
        """
        Render a command to a composable statement.

        Args:
            command: Any command value
            redact: Replace the password literal with '***'

        Raises:
            TypeError: unknown command type
        """
        if isinstance(command, CreateRole):
            return SQLRenderer.create_role(command, redact=redact)
        if isinstance(command, GrantRoleMembership):
            return SQLRenderer.grant_role_membership(command)
        if isinstance(command, CreateDatabase):
            return SQLRenderer.create_database(command)
        if isinstance(command, GrantDatabasePrivileges):
            return SQLRenderer.grant_database_privileges(command)
        if isinstance(command, CreateExtension):
            return SQLRenderer.create_extension(command)
        if isinstance(command, CreateSchema):
            return SQLRenderer.create_schema(command)
        if isinstance(command, GrantSchemaPrivileges):
            return SQLRenderer.grant_schema_privileges(command)
        raise TypeError(f"Cannot render {type(command).__name__}")

    @staticmethod
    def to_text(command: Command, redact: bool = True) -> str:
        """Render to a plain string, redacting the password by default."""
        return SQLRenderer.render(command, redact=redact).as_string(None)

    # ------------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------------

    @staticmethod
    def create_role(command: CreateRole, redact: bool = False) -> sql.Composed:
        """CREATE ROLE "name" or CREATE ROLE "name" WITH LOGIN PASSWORD '...'."""
        if not command.login:
            return sql.SQL("CREATE ROLE {}").format(sql.Identifier(command.name))
        password = REDACTED_PASSWORD if redact else sql.Literal(command.password)
        return sql.SQL("CREATE ROLE {} WITH LOGIN PASSWORD {}").format(
            sql.Identifier(command.name), password
        )

    @staticmethod
    def grant_role_membership(command: GrantRoleMembership) -> sql.Composed:
        return sql.SQL("GRANT {} TO {}").format(
            sql.Identifier(command.member_of), sql.Identifier(command.role)
        )

    # ------------------------------------------------------------------------
    # Databases
    # ------------------------------------------------------------------------

    @staticmethod
    def create_database(command: CreateDatabase) -> sql.Composed:
        """
        CREATE DATABASE with only the clauses that are set.

        Clause order: OWNER, ENCODING, LC_COLLATE, LC_CTYPE, TEMPLATE.
        """
        parts = [sql.SQL("CREATE DATABASE {}").format(sql.Identifier(command.name))]
        if command.owner:
            parts.append(sql.SQL("OWNER {}").format(sql.Identifier(command.owner)))
        if command.encoding:
            parts.append(sql.SQL("ENCODING {}").format(sql.Literal(command.encoding)))
        if command.lc_collate:
            parts.append(sql.SQL("LC_COLLATE {}").format(sql.Literal(command.lc_collate)))
        if command.lc_ctype:
            parts.append(sql.SQL("LC_CTYPE {}").format(sql.Literal(command.lc_ctype)))
        if command.template:
            parts.append(sql.SQL("TEMPLATE {}").format(sql.Identifier(command.template)))
        return sql.SQL(" ").join(parts)

    @staticmethod
    def grant_database_privileges(command: GrantDatabasePrivileges) -> sql.Composed:
        return sql.SQL("GRANT {} ON DATABASE {} TO {}").format(
            _privilege_list(command.privileges),
            sql.Identifier(command.database),
            sql.Identifier(command.grantee),
        )

    # ------------------------------------------------------------------------
    # Extensions and schemas
    # ------------------------------------------------------------------------

    @staticmethod
    def create_extension(command: CreateExtension) -> sql.Composed:
        return sql.SQL("CREATE EXTENSION IF NOT EXISTS {}").format(sql.Identifier(command.name))

    @staticmethod
    def create_schema(command: CreateSchema) -> sql.Composed:
        return sql.SQL("CREATE SCHEMA {} AUTHORIZATION {}").format(
            sql.Identifier(command.name), sql.Identifier(command.owner)
        )

    @staticmethod
    def grant_schema_privileges(command: GrantSchemaPrivileges) -> sql.Composed:
        """
        One statement per tier.

        The DEFAULT tier becomes ALTER DEFAULT PRIVILEGES FOR ROLE owner, so
        it covers tables the schema owner creates later.
        """
        privileges = _privilege_list(command.privileges)
        subject = sql.Identifier(command.subject.name)
        schema = sql.Identifier(command.schema)

        if command.tier is GrantTier.DEFAULT:
            if not command.owner:
                raise ValueError(f"default privileges on schema '{command.schema}' need the schema owner")
            return sql.SQL(
                "ALTER DEFAULT PRIVILEGES FOR ROLE {} IN SCHEMA {} GRANT {} ON TABLES TO {}"
            ).format(sql.Identifier(command.owner), schema, privileges, subject)

        return sql.SQL("GRANT {} ON {} {} TO {}").format(
            privileges, sql.SQL(_TIER_TARGETS[command.tier]), schema, subject
        )
