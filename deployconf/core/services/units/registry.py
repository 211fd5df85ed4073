"""
Registry unit — the container image repository.
"""

from __future__ import annotations

from deployconf.core.config import naming
from deployconf.core.models.deployment import DeploymentConfig
from deployconf.core.models.plan import DeployTarget, ResourceDecl, UnitOutput, UnitPlan
from deployconf.core.services.units.common import new_plan, ref

UNIT = "registry"


def build(config: DeploymentConfig, target: DeployTarget | None = None) -> UnitPlan:
    """Declare the image repository and report its URI."""
    plan = new_plan(
        UNIT,
        config,
        naming.REGISTRY_STACK,
        f"Container Registry for {config.project} on ECS",
        target,
    )

    plan.resources.append(ResourceDecl(
        logical_id="EcrRepository",
        type="AWS::ECR::Repository",
        properties={
            "repository_name": naming.canonical_id(config, naming.REGISTRY_REPOSITORY),
            "removal_policy": "destroy",
        },
    ))

    plan.outputs.append(UnitOutput(
        name="RepositoryURI",
        value=ref("EcrRepository", "RepositoryUri"),
        description="The URI of the ECR repository",
    ))
    return plan
