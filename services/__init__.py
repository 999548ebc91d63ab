"""
Services - stage provisioners and the bootstrap orchestrator.

The provisioner registry lives in services.registry; DatabaseBootstrapper
runs the stages in order and looks each provisioner up there.
"""

from .provisioner_base import BaseProvisioner
from .role_provisioner import RoleProvisioner, apply_roles
from .database_provisioner import DatabaseProvisioner, apply_databases
from .extension_provisioner import ExtensionProvisioner, apply_extensions
from .schema_provisioner import SchemaProvisioner, apply_schemas
from .registry import ALL_PROVISIONERS, get_provisioner
from .bootstrap_service import BootstrapSettings, DatabaseBootstrapper

__all__ = [
    'ALL_PROVISIONERS',
    'get_provisioner',
    'BaseProvisioner',
    'RoleProvisioner',
    'DatabaseProvisioner',
    'ExtensionProvisioner',
    'SchemaProvisioner',
    'apply_roles',
    'apply_databases',
    'apply_extensions',
    'apply_schemas',
    'BootstrapSettings',
    'DatabaseBootstrapper',
]
