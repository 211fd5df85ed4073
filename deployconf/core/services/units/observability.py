"""
Observability unit — resource group and real-user monitoring.

The resource group collects every resource carrying this deployment's
tag set, so its tag filters must be exactly ``naming.tags(config)``.
The RUM app monitor reports browser telemetry for the monitored domain
through an unauthenticated Cognito identity.
"""

from __future__ import annotations

from deployconf.core.config import naming
from deployconf.core.models.deployment import DeploymentConfig
from deployconf.core.models.plan import DeployTarget, ResourceDecl, UnitOutput, UnitPlan
from deployconf.core.services.units.common import new_plan, ref

UNIT = "observability"

RUM_TELEMETRIES = ["errors", "performance", "http", "interaction"]

_COGNITO_PRINCIPAL = "cognito-identity.amazonaws.com"


def app_monitor_arn(config: DeploymentConfig) -> str:
    """ARN pattern of the RUM app monitor (region/account filled at deploy)."""
    return (
        "arn:aws:rum:${AWS::Region}:${AWS::AccountId}:"
        f"appmonitor/{config.project_slug}"
    )


def resource_query(config: DeploymentConfig) -> dict:
    """Tag-filter query matching every resource of this deployment."""
    return {
        "type": "TAG_FILTERS_1_0",
        "query": {
            "resource_type_filters": ["AWS::AllSupported"],
            "tag_filters": [
                {"key": key, "values": [value]}
                for key, value in naming.tags(config).items()
            ],
        },
    }


def build(config: DeploymentConfig, target: DeployTarget | None = None) -> UnitPlan:
    """Declare the resource group, identity pool, role and app monitor."""
    plan = new_plan(
        UNIT,
        config,
        naming.OBSERVABILITY_STACK,
        f"Observability Resources for {config.project} on ECS",
        target,
    )
    group_name = naming.base_name(config)

    plan.resources.append(ResourceDecl(
        logical_id="ResourceGroup",
        type="AWS::ResourceGroups::Group",
        properties={
            "name": group_name,
            "resource_query": resource_query(config),
        },
    ))

    plan.resources.append(ResourceDecl(
        logical_id="RumIdentityPool",
        type="AWS::Cognito::IdentityPool",
        properties={"allow_unauthenticated_identities": True},
    ))

    plan.resources.append(ResourceDecl(
        logical_id="RumUnauthenticatedRole",
        type="AWS::IAM::Role",
        properties={
            "assumed_by": {
                "federated": _COGNITO_PRINCIPAL,
                "action": "sts:AssumeRoleWithWebIdentity",
                "conditions": {
                    "StringEquals": {
                        f"{_COGNITO_PRINCIPAL}:aud": ref("RumIdentityPool"),
                    },
                    "ForAnyValue:StringLike": {
                        f"{_COGNITO_PRINCIPAL}:amr": "unauthenticated",
                    },
                },
            },
            "policy_statements": [
                {
                    "effect": "Allow",
                    "actions": ["rum:PutRumEvents"],
                    "resources": [app_monitor_arn(config)],
                },
            ],
        },
    ))

    plan.resources.append(ResourceDecl(
        logical_id="RumIdentityPoolRoleAttachment",
        type="AWS::Cognito::IdentityPoolRoleAttachment",
        properties={
            "identity_pool_id": ref("RumIdentityPool"),
            "roles": {"unauthenticated": ref("RumUnauthenticatedRole", "Arn")},
        },
    ))

    plan.resources.append(ResourceDecl(
        logical_id="RumAppMonitor",
        type="AWS::RUM::AppMonitor",
        properties={
            "name": config.project_slug,
            "domain": config.monitored_domain,
            "cw_log_enabled": True,
            "app_monitor_configuration": {
                "allow_cookies": True,
                "enable_x_ray": True,
                "session_sample_rate": 1,
                "telemetries": list(RUM_TELEMETRIES),
                "identity_pool_id": ref("RumIdentityPool"),
                "guest_role_arn": ref("RumUnauthenticatedRole", "Arn"),
            },
        },
    ))

    plan.outputs.append(UnitOutput(
        name="ResourceGroupNameOutput",
        value=group_name,
        description="Resource Group Name",
        export_name=naming.canonical_id(config, naming.RESOURCE_GROUP),
    ))
    return plan
