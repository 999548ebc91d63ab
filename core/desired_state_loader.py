# ============================================================================
# DESIRED-STATE LOADER
# ============================================================================
# STATUS: Core - Document loading and secret resolution
# PURPOSE: Read the YAML bootstrap document into DesiredState and attach
#          resolved role passwords before any database command
# ============================================================================
"""
Desired-State Loader.

Loading and secret resolution happen before the engine runs, so every
document or credential problem is reported before the first connection.

Exports:
    load_desired_state: Read and validate a YAML file
    parse_desired_state: Validate YAML text
    collect_secrets: Build the secrets mapping from an environment
    resolve_secrets: Return a DesiredState with role passwords attached
"""

from pathlib import Path
from typing import Dict, Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from core.models.desired_state import DesiredState
from core.models.enums import ObjectKind, Stage
from exceptions import DesiredStateError, MissingCredential
from util_logger import ComponentType, LoggerFactory

logger = LoggerFactory.create_logger(ComponentType.LOADER, "DesiredStateLoader")


def _format_validation_error(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        problems.append(f"{location}: {item['msg']}")
    return "; ".join(problems)


def parse_desired_state(text: str, source: str = "<string>") -> DesiredState:
    """
    Parse YAML text into a validated DesiredState.

    An empty document is an empty desired state.

    Raises:
        DesiredStateError: malformed YAML, non-mapping root, or schema violation
    """
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DesiredStateError(f"Malformed YAML in {source}: {e}", stage="load") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise DesiredStateError(
            f"Expected YAML mapping at top level, got {type(raw).__name__}: {source}",
            stage="load",
        )

    try:
        state = DesiredState.model_validate(raw)
    except ValidationError as e:
        raise DesiredStateError(
            f"Invalid desired state in {source}: {_format_validation_error(e)}",
            stage="load",
        ) from e

    logger.debug(
        f"Parsed desired state from {source}",
        extra={'custom_dimensions': {
            'roles': len(state.roles),
            'databases': len(state.databases),
        }}
    )
    return state


def load_desired_state(path: Union[str, Path]) -> DesiredState:
    """
    Load the bootstrap document from disk.

    Raises:
        DesiredStateError: file missing/unreadable, or any parse_desired_state error
    """
    resolved = Path(path)
    if not resolved.exists():
        raise DesiredStateError(f"Bootstrap document not found: {resolved}", stage="load")

    logger.info(f"📄 Loading desired state from {resolved}")
    try:
        text = resolved.read_text(encoding="utf-8")
    except OSError as e:
        raise DesiredStateError(f"Cannot read bootstrap document {resolved}: {e}", stage="load") from e

    return parse_desired_state(text, source=str(resolved))


def collect_secrets(state: DesiredState, environ: Mapping[str, str]) -> Dict[str, str]:
    """
    Pick every referenced password_env key out of an environment.

    Keys that are not present are left out; resolve_secrets reports them.
    """
    secrets = {}
    for role in state.roles:
        key = role.password_env
        if key and key in environ:
            secrets[key] = environ[key]
    return secrets


def resolve_secrets(state: DesiredState, secrets: Optional[Mapping[str, str]]) -> DesiredState:
    """
    Attach resolved passwords to roles.

    Args:
        state: Loaded desired state
        secrets: password_env key -> plaintext credential

    Returns:
        New DesiredState whose RoleSpecs carry their password

    Raises:
        MissingCredential: a referenced secret is missing or empty, or a
            login role has no secret reference at all
    """
    secrets = secrets or {}
    resolved_roles = []

    for role in state.roles:
        password = role.password
        if role.password_env:
            password = secrets.get(role.password_env)
            if not password:
                raise MissingCredential(
                    f"missing secret '{role.password_env}'",
                    stage=Stage.SECRETS.value,
                    object_kind=ObjectKind.ROLE.value,
                    object_name=role.name,
                )
        if role.can_login and not password:
            raise MissingCredential(
                "login role has no password_env",
                stage=Stage.SECRETS.value,
                object_kind=ObjectKind.ROLE.value,
                object_name=role.name,
            )
        resolved_roles.append(role.model_copy(update={"password": password}))

    logger.debug(f"Resolved credentials for {sum(1 for r in resolved_roles if r.password)} roles")
    return state.model_copy(update={"roles": resolved_roles})
