"""
Provisioning units — declarative plans built from the resolved record.

Each unit module exposes a ``build(config, target)`` function that
returns a ``UnitPlan``.  Units share nothing but the configuration
record; names and tags come from ``deployconf.core.config.naming``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

import yaml

from deployconf.core.models.deployment import DeploymentConfig
from deployconf.core.models.plan import DeployTarget, UnitPlan
from deployconf.core.models.template import GeneratedFile
from deployconf.core.services.units import compute, observability, registry

logger = logging.getLogger(__name__)

# Deployment order: the service pulls from the registry; monitoring comes last
UNIT_BUILDERS: dict[str, Callable[[DeploymentConfig, DeployTarget | None], UnitPlan]] = {
    registry.UNIT: registry.build,
    compute.UNIT: compute.build,
    observability.UNIT: observability.build,
}


def available_units() -> list[str]:
    """Unit names in deployment order."""
    return list(UNIT_BUILDERS)


def build_plans(
    config: DeploymentConfig,
    target: DeployTarget | None = None,
    units: Iterable[str] | None = None,
) -> list[UnitPlan]:
    """Build plans for the selected units (all by default), in order.

    Raises:
        ValueError: If a requested unit does not exist.
    """
    selected = set(units) if units else set(UNIT_BUILDERS)
    unknown = selected - set(UNIT_BUILDERS)
    if unknown:
        raise ValueError(
            f"Unknown unit(s): {', '.join(sorted(unknown))}. "
            f"Available: {', '.join(UNIT_BUILDERS)}"
        )

    plans = [
        builder(config, target)
        for name, builder in UNIT_BUILDERS.items()
        if name in selected
    ]
    logger.debug("Built %d unit plan(s): %s", len(plans), [p.stack_id for p in plans])
    return plans


def render_plan(plan: UnitPlan) -> str:
    """Serialize a plan to YAML, keys in declaration order."""
    return yaml.safe_dump(
        plan.model_dump(mode="json"),
        sort_keys=False,
        default_flow_style=False,
    )


def generate_plan_files(
    plans: Iterable[UnitPlan],
    out_dir: str = "plan.out",
    *,
    overwrite: bool = False,
) -> list[GeneratedFile]:
    """One YAML file per plan, named after its stack id."""
    return [
        GeneratedFile(
            path=f"{out_dir}/{plan.stack_id}.yml",
            content=render_plan(plan),
            unit=plan.unit,
            overwrite=overwrite,
            reason=plan.description,
        )
        for plan in plans
    ]


def write_generated_file(root: Path, file: GeneratedFile) -> bool:
    """Write a GeneratedFile under ``root``.

    Returns:
        True if written, False if it exists and overwrite is off.
    """
    target = file.target(root)
    if target.exists() and not file.overwrite:
        logger.info("Skipping existing file: %s", target)
        return False

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(file.content, encoding="utf-8")
    logger.info("Wrote plan file: %s", target)
    return True
