"""
Plan use case — build unit plans from the resolved record, optionally
writing them to disk (synth).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from deployconf.core.models.deployment import DeploymentConfig
from deployconf.core.models.plan import UnitPlan
from deployconf.core.models.template import GeneratedFile
from deployconf.core.services.units import (
    build_plans,
    generate_plan_files,
    write_generated_file,
)
from deployconf.core.use_cases.resolve import deploy_target, resolve_deployment

logger = logging.getLogger(__name__)

DEFAULT_OUT_DIR = "plan.out"


@dataclass
class PlanResult:
    """Unit plans for one resolved configuration."""

    config: DeploymentConfig | None = None
    plans: list[UnitPlan] = field(default_factory=list)
    project_root: Path | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "project": self.config.project if self.config else None,
            "environment": self.config.environment if self.config else None,
            "plans": [p.model_dump(mode="json") for p in self.plans],
        }


@dataclass
class SynthResult:
    """Outcome of writing plan files."""

    out_dir: Path | None = None
    files: list[GeneratedFile] = field(default_factory=list)
    written: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "out_dir": str(self.out_dir) if self.out_dir else None,
            "written": self.written,
            "skipped": self.skipped,
        }


def plan_units(
    config_path: Path | None = None,
    manifest_path: Path | None = None,
    cli_context: dict[str, Any] | None = None,
    units: list[str] | None = None,
) -> PlanResult:
    """Resolve configuration and build plans for the selected units."""
    result = PlanResult()

    resolved = resolve_deployment(config_path, manifest_path, cli_context)
    if resolved.error:
        result.error = resolved.error
        return result

    assert resolved.config is not None
    result.config = resolved.config
    result.project_root = resolved.sources.project_root if resolved.sources else None

    try:
        result.plans = build_plans(resolved.config, deploy_target(), units)
    except ValueError as e:
        result.error = str(e)

    return result


def synth_units(
    config_path: Path | None = None,
    manifest_path: Path | None = None,
    cli_context: dict[str, Any] | None = None,
    *,
    out_dir: str = DEFAULT_OUT_DIR,
    overwrite: bool = False,
) -> SynthResult:
    """Build every unit plan and write one YAML file per unit.

    Files land in ``out_dir`` relative to the project root.  Existing
    files are kept unless ``overwrite`` is set.
    """
    result = SynthResult()

    planned = plan_units(config_path, manifest_path, cli_context)
    if planned.error:
        result.error = planned.error
        return result

    root = planned.project_root or Path.cwd()
    result.out_dir = root / out_dir
    result.files = generate_plan_files(planned.plans, out_dir, overwrite=overwrite)

    for file in result.files:
        try:
            written = write_generated_file(root, file)
        except OSError as e:
            result.error = f"Cannot write {file.path}: {e}"
            return result
        (result.written if written else result.skipped).append(file.path)

    logger.info(
        "Synth complete: %d written, %d skipped", len(result.written), len(result.skipped)
    )
    return result
