"""
Config check use case — validate configuration sources and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from deployconf.core.config.loader import ConfigError, LoadedSources, load_sources
from deployconf.core.config.resolver import ConfigurationError, resolve
from deployconf.core.models.deployment import (
    DEFAULT_ENVIRONMENT,
    DEFAULT_MONITORED_DOMAIN,
    DeploymentConfig,
)


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: DeploymentConfig | None = None
    sources: LoadedSources | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "project": self.config.project if self.config else None,
            "environment": self.config.environment if self.config else None,
            "sources": self.sources.to_dict() if self.sources else {},
        }


def check_config(
    config_path: Path | None = None,
    manifest_path: Path | None = None,
    cli_context: dict[str, Any] | None = None,
) -> ConfigCheckResult:
    """Validate configuration sources and report issues.

    Errors make the configuration unusable; warnings flag values that
    resolve but are probably not what the operator wants.
    """
    result = ConfigCheckResult()

    try:
        sources = load_sources(config_path, manifest_path, cli_context)
        result.sources = sources
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    if sources.settings_path is None:
        result.warnings.append("No deploy.yml found; using command-line values and defaults.")

    if sources.manifest_path is None:
        result.warnings.append(
            "No manifest (package.json or pyproject.toml) found; "
            "project and version must be given explicitly."
        )

    for key in sources.unknown_keys:
        result.warnings.append(f"Unknown configuration key ignored: {key}")

    try:
        config = resolve(sources.overrides, sources.manifest)
        result.config = config
    except ConfigurationError as e:
        result.errors.append(str(e))
        return result

    # Semantic checks
    if config.desired_instance_count == 0:
        result.warnings.append("desired_instance_count is 0; the service will run no tasks.")

    if (
        config.environment_slug != DEFAULT_ENVIRONMENT
        and config.monitored_domain == DEFAULT_MONITORED_DOMAIN
    ):
        result.warnings.append(
            f"monitored_domain is '{DEFAULT_MONITORED_DOMAIN}' "
            f"in environment '{config.environment}'."
        )

    if config.project != config.project_slug:
        result.warnings.append(
            f"Project '{config.project}' is not lowercase; "
            f"resource names will use '{config.project_slug}'."
        )

    result.valid = len(result.errors) == 0
    return result
