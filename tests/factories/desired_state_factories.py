"""
Randomized desired-state factories: anti-overfitting design.

Every factory call generates randomized object names unless a name is
given, so tests cannot rely on specific default values.
"""

import random
import string


def _random_suffix(length: int = 6) -> str:
    """Generate random lowercase alphanumeric suffix."""
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=length))


def make_role(name: str = None, **overrides) -> dict:
    """
    Build a RoleSpec dict (non-login, no memberships by default).

    Returns:
        dict suitable for RoleSpec(**result) or a 'users' list entry
    """
    base = {
        "name": name or f"role_{_random_suffix()}",
        "can_login": False,
        "owns_schemas": [],
        "roles": [],
    }
    base.update(overrides)
    return base


def make_login_role(name: str = None, password_env: str = None, **overrides) -> dict:
    """Login role referencing a password env key."""
    suffix = _random_suffix()
    return make_role(
        name=name or f"user_{suffix}",
        can_login=True,
        password_env=password_env or f"PW_{suffix.upper()}",
        **overrides,
    )


def make_schema_grant(user: str = None, role: str = None, **tiers) -> dict:
    """SchemaGrant dict; tiers default to empty."""
    base = {
        "privileges": [],
        "table_privileges": [],
        "sequence_privileges": [],
        "function_privileges": [],
        "default_privileges": [],
    }
    if user is not None:
        base["user"] = user
    if role is not None:
        base["role"] = role
    base.update(tiers)
    return base


def make_schema(name: str = None, owner: str = None, grants: list = None) -> dict:
    return {
        "name": name or f"schema_{_random_suffix()}",
        "owner": owner or f"owner_{_random_suffix()}",
        "grants": grants or [],
    }


def make_database(name: str = None, owner: str = None, **overrides) -> dict:
    """DatabaseSpec dict with only name and owner set."""
    base = {
        "name": name or f"db_{_random_suffix()}",
        "owner": owner or f"owner_{_random_suffix()}",
    }
    base.update(overrides)
    return base


def make_desired_state(roles: list = None, databases: list = None) -> dict:
    """Document-shaped dict (roles under 'users')."""
    return {
        "users": roles or [],
        "databases": databases or [],
    }


def make_app_scenario(password_env: str = "APP_OWNER_PASSWORD") -> dict:
    """
    The canonical app scenario: one owner role, one database with
    uuid-ossp, and a public schema granted to the readonly role.
    """
    return make_desired_state(
        roles=[make_login_role(name="app_owner", password_env=password_env)],
        databases=[
            make_database(
                name="app_db",
                owner="app_owner",
                extensions=["uuid-ossp"],
                schemas=[
                    make_schema(
                        name="public",
                        owner="app_owner",
                        grants=[
                            make_schema_grant(
                                role="readonly",
                                privileges=["USAGE"],
                                table_privileges=["SELECT"],
                            )
                        ],
                    )
                ],
            )
        ],
    )
