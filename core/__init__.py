"""
Core Reconciliation Components.

Contains the building blocks the provisioners work with, separated from the
provisioning logic itself (services package).

Structure:
    models/: Pure data structures (desired state, commands, results)
    schema/: SQL rendering for command values
    desired_state_loader: YAML document loading and secret resolution
"""

# Make subpackages available first (no circular dependencies)
from . import models
from . import schema

__all__ = [
    'models',
    'schema',
]
