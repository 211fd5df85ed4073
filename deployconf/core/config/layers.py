"""
Layered lookup — one precedence rule shared by every configuration field.

A field's value is the first *present* candidate in an ordered list of
sources.  ``None`` and blank strings are absent; everything else
(including ``0`` and ``False``) is present.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

# Alternate spellings accepted for override keys → canonical field name.
# camelCase names are the documented operator keys; the ecr*/domainName/
# desiredCount names are the provisioning-framework context keys.
KEY_ALIASES: dict[str, str] = {
    "registryRepoName": "registry_repo_name",
    "registryImageTag": "registry_image_tag",
    "monitoredDomain": "monitored_domain",
    "desiredInstanceCount": "desired_instance_count",
    "ecrRepoName": "registry_repo_name",
    "ecrImageTag": "registry_image_tag",
    "domainName": "monitored_domain",
    "desiredCount": "desired_instance_count",
}

OVERRIDABLE_FIELDS: tuple[str, ...] = (
    "project",
    "environment",
    "version",
    "registry_repo_name",
    "registry_image_tag",
    "monitored_domain",
    "desired_instance_count",
)


def is_present(value: Any) -> bool:
    """True if ``value`` counts as supplied."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def first_present(*candidates: Any) -> Any:
    """Return the first present candidate, or None if none is."""
    for value in candidates:
        if is_present(value):
            return value.strip() if isinstance(value, str) else value
    return None


def canonical_key(key: str) -> str:
    """Map an override key to its field name (unknown keys pass through)."""
    return KEY_ALIASES.get(key, key)


def normalize_overrides(overrides: Mapping[str, Any] | None) -> dict[str, Any]:
    """Canonicalize keys and drop unknown ones and absent values.

    When an alias and the field name are both present, the field name wins.
    """
    if not overrides:
        return {}

    normalized: dict[str, Any] = {}
    for key, value in overrides.items():
        field = canonical_key(key)
        if field not in OVERRIDABLE_FIELDS:
            logger.debug("Ignoring unknown override key: %s", key)
            continue
        if not is_present(value):
            continue
        if field in normalized and key != field:
            continue
        normalized[field] = value
    return normalized


def unknown_keys(overrides: Mapping[str, Any] | None) -> list[str]:
    """Override keys that map to no configuration field."""
    if not overrides:
        return []
    return sorted(k for k in overrides if canonical_key(k) not in OVERRIDABLE_FIELDS)
