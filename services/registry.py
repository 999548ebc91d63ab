"""
Provisioner Registry - Explicit Registration (No Decorators!)

All stage provisioners are registered here explicitly. No decorators, no
auto-discovery, no import magic. If you don't see it in ALL_PROVISIONERS,
the bootstrapper does not know about it.

Stage order is fixed by DatabaseBootstrapper; it resolves each stage's
provisioner class through get_provisioner().

Provisioner Contract:
    class XProvisioner(BaseProvisioner):
        stage = Stage.X

        def apply_x(self, session: IAdminSession, items: Sequence[...]) -> None:
            '''
            Ensure each item exists (existence-guarded), then apply grants.
            Raise a BootstrapError subclass on the first failure.
            '''
"""

from core.models.enums import Stage

from .database_provisioner import DatabaseProvisioner
from .extension_provisioner import ExtensionProvisioner
from .role_provisioner import RoleProvisioner
from .schema_provisioner import SchemaProvisioner

# ============================================================================
# EXPLICIT PROVISIONER REGISTRY
# ============================================================================
# To add a new stage:
# 1. Add it to core.models.enums.Stage
# 2. Create services/<kind>_provisioner.py subclassing BaseProvisioner
# 3. Import it above and add it below
# 4. Call it from DatabaseBootstrapper._run_stages
# ============================================================================

ALL_PROVISIONERS = {
    Stage.ROLES: RoleProvisioner,
    Stage.DATABASES: DatabaseProvisioner,
    Stage.EXTENSIONS: ExtensionProvisioner,
    Stage.SCHEMAS: SchemaProvisioner,
}


def get_provisioner(stage: Stage) -> type:
    """
    Look up the provisioner class for a stage.

    Raises:
        ValueError: stage has no provisioner (e.g. Stage.SECRETS)
    """
    if stage not in ALL_PROVISIONERS:
        available = ", ".join(s.value for s in ALL_PROVISIONERS)
        raise ValueError(f"No provisioner for stage '{stage.value}'. Available: {available}")
    return ALL_PROVISIONERS[stage]
