"""
Naming and tagging policy — canonical identifiers for every unit.

All names are ``{environment}-{project}-{suffix}`` in lowercase and are
pure functions of the resolved record, so a re-deploy addresses the same
logical resources instead of creating new ones.

The tag set is the same for every unit; the observability resource
group finds the other units' resources by these tags.
"""

from __future__ import annotations

import re

from deployconf.core.models.deployment import DeploymentConfig

# Stack id suffixes
REGISTRY_STACK = "ecr"
COMPUTE_STACK = "ecs"
OBSERVABILITY_STACK = "observability"

# Resource name suffixes
REGISTRY_REPOSITORY = "ecr-repository"
CONTAINER = "container"
RESOURCE_GROUP = "resource-group"

TAG_PROJECT = "project"
TAG_ENVIRONMENT = "environment"

# Project and environment end up in stack ids and plan file names:
# letters, digits and hyphens only, starting with a letter or digit
NAME_PART_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9-]*$")


def is_valid_name_part(value: str) -> bool:
    """True if ``value`` may appear in a canonical id."""
    return bool(NAME_PART_PATTERN.match(value))


def base_name(config: DeploymentConfig) -> str:
    """``{environment}-{project}``, lowercase."""
    return f"{config.environment_slug}-{config.project_slug}"


def stack_prefix(config: DeploymentConfig) -> str:
    """Prefix shared by every canonical id of this deployment."""
    return f"{base_name(config)}-"


def canonical_id(config: DeploymentConfig, suffix: str) -> str:
    """Canonical identifier for a unit or resource.

    Raises:
        ValueError: If ``suffix`` is blank.
    """
    suffix = suffix.strip()
    if not suffix:
        raise ValueError("canonical_id requires a non-empty suffix")
    return f"{stack_prefix(config)}{suffix.lower()}"


def tags(config: DeploymentConfig) -> dict[str, str]:
    """Tag set applied uniformly to every provisioning unit."""
    return {
        TAG_PROJECT: config.project_slug,
        TAG_ENVIRONMENT: config.environment_slug,
    }


def unit_names(config: DeploymentConfig) -> dict[str, dict[str, str]]:
    """Canonical names each unit derives, keyed by unit."""
    return {
        "registry": {
            "stack_id": canonical_id(config, REGISTRY_STACK),
            "repository_name": canonical_id(config, REGISTRY_REPOSITORY),
        },
        "compute": {
            "stack_id": canonical_id(config, COMPUTE_STACK),
            "container_name": canonical_id(config, CONTAINER),
        },
        "observability": {
            "stack_id": canonical_id(config, OBSERVABILITY_STACK),
            "resource_group_name": base_name(config),
            "resource_group_export": canonical_id(config, RESOURCE_GROUP),
            "app_monitor_name": config.project_slug,
        },
    }
