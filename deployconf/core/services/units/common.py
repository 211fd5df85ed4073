"""
Shared helpers for unit plan builders.
"""

from __future__ import annotations

from deployconf.core.config import naming
from deployconf.core.models.deployment import DeploymentConfig
from deployconf.core.models.plan import DeployTarget, UnitPlan


def ref(logical_id: str, attribute: str | None = None) -> str:
    """Reference to another resource, filled in at deploy time."""
    if attribute:
        return f"${{{logical_id}.{attribute}}}"
    return f"${{{logical_id}}}"


def new_plan(
    unit: str,
    config: DeploymentConfig,
    suffix: str,
    description: str,
    target: DeployTarget | None = None,
) -> UnitPlan:
    """Empty plan carrying the canonical stack id and the shared tags."""
    return UnitPlan(
        unit=unit,
        stack_id=naming.canonical_id(config, suffix),
        description=description,
        target=target or DeployTarget(),
        tags=naming.tags(config),
    )
