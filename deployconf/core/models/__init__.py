"""
Domain models — Pydantic types for deployment configuration.

All models are re-exported here for convenient access:

    from deployconf.core.models import DeploymentConfig, Manifest, UnitPlan
"""

from deployconf.core.models.deployment import DeploymentConfig, Manifest
from deployconf.core.models.plan import DeployTarget, ResourceDecl, UnitOutput, UnitPlan
from deployconf.core.models.template import GeneratedFile

__all__ = [
    # deployment.py
    "DeploymentConfig",
    # plan.py
    "DeployTarget",
    # template.py
    "GeneratedFile",
    "Manifest",
    "ResourceDecl",
    "UnitOutput",
    "UnitPlan",
]
