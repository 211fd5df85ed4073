"""
Compute unit — network, cluster, load-balanced service and CDN.

Declares a two-AZ VPC, an ECS cluster running one Fargate task
definition behind a public application load balancer, and a CloudFront
distribution in front of the load balancer.  The container image comes
from the registry repository named in the configuration record.
"""

from __future__ import annotations

from deployconf.core.config import naming
from deployconf.core.models.deployment import DeploymentConfig
from deployconf.core.models.plan import DeployTarget, ResourceDecl, UnitOutput, UnitPlan
from deployconf.core.services.units.common import new_plan, ref

UNIT = "compute"

CONTAINER_PORT = 3000

_VPC = {
    "max_azs": 2,
    "nat_gateways": 1,  # the account's default VPC cannot be used
}

_TASK_SIZE = {
    "memory_limit_mib": 4096,
    "cpu": 1024,
}

_HEALTH_CHECK = {
    "path": "/",
    "port": str(CONTAINER_PORT),
    "healthy_http_codes": "200",
    "healthy_threshold_count": 2,
    "unhealthy_threshold_count": 2,
    "timeout_seconds": 5,
    "interval_seconds": 10,
}

_TARGET_GROUP_ATTRIBUTES = {
    "deregistration_delay.timeout_seconds": "30",
}


def image_uri(config: DeploymentConfig) -> str:
    """``{repo}:{tag}`` reference for the service container."""
    return f"{config.registry_repo_name}:{config.registry_image_tag}"


def build(config: DeploymentConfig, target: DeployTarget | None = None) -> UnitPlan:
    """Declare the service stack and its load balancer / CDN outputs."""
    plan = new_plan(
        UNIT,
        config,
        naming.COMPUTE_STACK,
        f"Deployment Stack for {config.project} on ECS",
        target,
    )

    plan.resources.append(ResourceDecl(
        logical_id="Vpc",
        type="AWS::EC2::VPC",
        properties=dict(_VPC),
    ))

    plan.resources.append(ResourceDecl(
        logical_id="EcsCluster",
        type="AWS::ECS::Cluster",
        properties={"vpc": ref("Vpc")},
    ))

    plan.resources.append(ResourceDecl(
        logical_id="TaskDefinition",
        type="AWS::ECS::TaskDefinition",
        properties={"launch_type": "FARGATE", **_TASK_SIZE},
    ))

    plan.resources.append(ResourceDecl(
        logical_id="ContainerDefinition",
        type="AWS::ECS::ContainerDefinition",
        properties={
            "container_name": naming.canonical_id(config, naming.CONTAINER),
            "task_definition": ref("TaskDefinition"),
            "image": {
                "repository_name": config.registry_repo_name,
                "tag": config.registry_image_tag,
                "uri": image_uri(config),
            },
            "environment": {},
            "logging": {
                "driver": "awslogs",
                "stream_prefix": config.project_slug,
            },
            "port_mappings": [{"container_port": CONTAINER_PORT}],
        },
    ))

    plan.resources.append(ResourceDecl(
        logical_id="ECSFargate",
        type="AWS::ECS::ApplicationLoadBalancedFargateService",
        properties={
            "cluster": ref("EcsCluster"),
            "task_definition": ref("TaskDefinition"),
            "desired_count": config.desired_instance_count,
            "public_load_balancer": True,
            "target_group": {
                "attributes": dict(_TARGET_GROUP_ATTRIBUTES),
                "health_check": dict(_HEALTH_CHECK),
            },
        },
    ))

    plan.resources.append(ResourceDecl(
        logical_id="CloudFront",
        type="AWS::CloudFront::Distribution",
        properties={
            "comment": (
                f"The {config.environment_slug} Cloud Front Distribution "
                f"for the {config.project_slug} service."
            ),
            "minimum_protocol_version": "TLSv1.2_2021",
            "default_behavior": {
                "cache_policy": "CachingOptimized",
                "origin": {
                    "load_balancer": ref("ECSFargate", "LoadBalancer"),
                    "protocol_policy": "http-only",
                },
            },
        },
    ))

    plan.outputs.append(UnitOutput(
        name="LoadBalancerDNS",
        value=ref("ECSFargate", "LoadBalancerDnsName"),
        description="Load Balancer DNS",
    ))
    plan.outputs.append(UnitOutput(
        name="CloudFrontDomainName",
        value=ref("CloudFront", "DomainName"),
        description="CloudFront Domain Name",
    ))
    return plan
