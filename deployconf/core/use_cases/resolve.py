"""
Resolve use case — the single program-start resolution step.

Loads every source once, resolves one immutable record, and returns it
together with where each input came from.  Everything downstream takes
the record as an argument; nothing re-reads configuration.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from deployconf.core.config import naming
from deployconf.core.config.loader import ConfigError, LoadedSources, load_sources
from deployconf.core.config.resolver import ConfigurationError, resolve
from deployconf.core.models.deployment import DeploymentConfig
from deployconf.core.models.plan import DeployTarget

ENV_ACCOUNT = "CDK_DEFAULT_ACCOUNT"
ENV_REGION = "CDK_DEFAULT_REGION"


@dataclass
class ResolveResult:
    """Resolved configuration plus its provenance."""

    config: DeploymentConfig | None = None
    sources: LoadedSources | None = None
    error: str | None = None
    error_field: str | None = None

    @property
    def ok(self) -> bool:
        return self.config is not None and self.error is None

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        if self.error:
            result: dict = {"error": self.error}
            if self.error_field:
                result["field"] = self.error_field
            return result

        assert self.config is not None
        return {
            "config": self.config.to_dict(),
            "tags": naming.tags(self.config),
            "stack_prefix": naming.stack_prefix(self.config),
            "sources": self.sources.to_dict() if self.sources else {},
        }


def deploy_target(environ: Mapping[str, str] | None = None) -> DeployTarget:
    """Account/region from the provisioning CLI's environment variables."""
    env = os.environ if environ is None else environ
    return DeployTarget(
        account=env.get(ENV_ACCOUNT) or None,
        region=env.get(ENV_REGION) or None,
    )


def resolve_deployment(
    config_path: Path | None = None,
    manifest_path: Path | None = None,
    cli_context: dict[str, Any] | None = None,
) -> ResolveResult:
    """Load all sources and resolve the deployment configuration.

    Args:
        config_path: Optional explicit path to deploy.yml.
        manifest_path: Optional explicit manifest path.
        cli_context: ``--context`` values from the command line.

    Returns:
        ResolveResult with either a config or an error message.
    """
    result = ResolveResult()

    try:
        result.sources = load_sources(config_path, manifest_path, cli_context)
    except ConfigError as e:
        result.error = str(e)
        return result

    try:
        result.config = resolve(result.sources.overrides, result.sources.manifest)
    except ConfigurationError as e:
        result.error = f"Invalid configuration: {e}"
        result.error_field = e.field

    return result
