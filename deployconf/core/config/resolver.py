"""
Configuration resolver — layered sources in, one immutable record out.

Precedence for every field:

    explicit override  >  manifest (project/version only)  >  default

This is a pure function of its inputs: no files, no environment
variables, no module state.  The loader gathers the inputs; the
resolver only decides.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from deployconf.core.config.layers import first_present, normalize_overrides
from deployconf.core.config.naming import is_valid_name_part
from deployconf.core.models.deployment import (
    DEFAULT_DESIRED_INSTANCE_COUNT,
    DEFAULT_ENVIRONMENT,
    DEFAULT_MONITORED_DOMAIN,
    DEFAULT_REGISTRY_IMAGE_TAG,
    DEFAULT_REGISTRY_REPO_NAME,
    DeploymentConfig,
    Manifest,
)

logger = logging.getLogger(__name__)

REPO_NAME_SEPARATOR = "/"


class ConfigurationError(ValueError):
    """Raised when resolved configuration is unusable.

    Attributes:
        field: Name of the offending configuration field.
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}")


def resolve(
    overrides: Mapping[str, Any] | None,
    manifest: Mapping[str, Any] | Manifest | None,
) -> DeploymentConfig:
    """Resolve the deployment configuration record.

    Args:
        overrides: Operator-supplied values keyed by field name or alias.
        manifest: Project manifest providing ``name`` and ``version``.

    Returns:
        Frozen DeploymentConfig with every field populated.

    Raises:
        ConfigurationError: If a required field is empty after precedence,
            ``desired_instance_count`` is not a non-negative integer, or
            ``registry_repo_name`` is not ``namespace/repo``, or
            ``project``/``environment`` cannot appear in a resource name.
    """
    ov = normalize_overrides(overrides)
    mf = _coerce_manifest(manifest)

    project = _required("project", first_present(ov.get("project"), mf.name))
    version = _required("version", first_present(ov.get("version"), mf.version))
    environment = _required(
        "environment", first_present(ov.get("environment"), DEFAULT_ENVIRONMENT)
    )
    repo_name = _required(
        "registry_repo_name",
        first_present(ov.get("registry_repo_name"), DEFAULT_REGISTRY_REPO_NAME),
    )
    image_tag = _required(
        "registry_image_tag",
        first_present(ov.get("registry_image_tag"), DEFAULT_REGISTRY_IMAGE_TAG),
    )
    domain = _required(
        "monitored_domain",
        first_present(ov.get("monitored_domain"), DEFAULT_MONITORED_DOMAIN),
    )
    count = _instance_count(
        first_present(ov.get("desired_instance_count"), DEFAULT_DESIRED_INSTANCE_COUNT)
    )

    validate_name_part("project", project)
    validate_name_part("environment", environment)
    validate_repo_name(repo_name)

    config = DeploymentConfig(
        project=project,
        environment=environment,
        version=version,
        registry_repo_name=repo_name,
        registry_image_tag=image_tag,
        monitored_domain=domain,
        desired_instance_count=count,
    )
    logger.debug(
        "Resolved configuration for %s/%s (version %s)",
        config.environment, config.project, config.version,
    )
    return config


def validate_name_part(field: str, value: str) -> None:
    """Require letters, digits and hyphens (no path separators or scopes)."""
    if not is_valid_name_part(value):
        raise ConfigurationError(
            field,
            f"{value!r} cannot be used in resource names; "
            f"use letters, digits and hyphens (set '{field}' explicitly)",
        )


def validate_repo_name(repo_name: str) -> None:
    """Require ``namespace/repo``: a separator and no empty segment."""
    segments = repo_name.split(REPO_NAME_SEPARATOR)
    if len(segments) < 2 or any(not s for s in segments):
        raise ConfigurationError(
            "registry_repo_name",
            f"expected 'namespace/repo', got {repo_name!r}",
        )


def _coerce_manifest(manifest: Mapping[str, Any] | Manifest | None) -> Manifest:
    if manifest is None:
        return Manifest()
    if isinstance(manifest, Manifest):
        return manifest
    return Manifest(
        name=str(manifest.get("name") or ""),
        version=str(manifest.get("version") or ""),
        description=str(manifest.get("description") or ""),
    )


def _required(field: str, value: Any) -> str:
    if value is None:
        raise ConfigurationError(field, "must not be empty")
    return str(value)


def _instance_count(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigurationError("desired_instance_count", f"expected an integer, got {value!r}")
    if isinstance(value, int):
        count = value
    else:
        try:
            count = int(str(value).strip())
        except ValueError:
            raise ConfigurationError(
                "desired_instance_count", f"expected an integer, got {value!r}"
            ) from None
    if count < 0:
        raise ConfigurationError("desired_instance_count", f"must be >= 0, got {count}")
    return count
