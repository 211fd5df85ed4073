"""
Source loader — reads the layered configuration inputs from disk.

Three operator override mechanisms are merged into one mapping, later
layers winning:

    deploy.yml  <  deploy.<environment>.yml  <  --context KEY=VALUE

The manifest (package.json or pyproject.toml) is loaded separately; it
only supplies fallbacks for ``project`` and ``version``.  Nothing here
decides a final value — that is the resolver's job.
"""

from __future__ import annotations

import json
import logging
import tomllib
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from deployconf.core.config.layers import (
    canonical_key,
    first_present,
    normalize_overrides,
    unknown_keys,
)
from deployconf.core.config.naming import is_valid_name_part
from deployconf.core.models.deployment import DEFAULT_ENVIRONMENT, Manifest

logger = logging.getLogger(__name__)

# Default settings filename
SETTINGS_FILE = "deploy.yml"

# Manifest candidates, in lookup order
MANIFEST_FILES = ("package.json", "pyproject.toml")

# Override fields whose values are used verbatim as text
TEXT_FIELDS = (
    "project",
    "environment",
    "version",
    "registry_repo_name",
    "registry_image_tag",
    "monitored_domain",
)


class ConfigError(Exception):
    """Raised when a configuration file is missing or malformed."""


@dataclass
class LoadedSources:
    """Everything read from disk for one resolution."""

    project_root: Path
    settings_path: Path | None = None
    env_defaults_path: Path | None = None
    manifest_path: Path | None = None
    overrides: dict[str, Any] = field(default_factory=dict)
    manifest: Manifest = field(default_factory=Manifest)
    unknown_keys: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "project_root": str(self.project_root),
            "settings_file": str(self.settings_path) if self.settings_path else None,
            "environment_file": (
                str(self.env_defaults_path) if self.env_defaults_path else None
            ),
            "manifest_file": str(self.manifest_path) if self.manifest_path else None,
        }


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Search for deploy.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to deploy.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / SETTINGS_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_settings(path: Path) -> dict[str, Any]:
    """Load override values from a settings YAML file.

    The values may sit under a ``context:`` key or at the top level.

    Raises:
        ConfigError: If the file is missing, unreadable, or not a mapping.
    """
    data = _read_yaml_mapping(path)
    context = data.get("context", data)
    if not isinstance(context, dict):
        raise ConfigError(f"Expected 'context' to be a mapping in {path}")
    logger.debug("Loaded %d settings from %s", len(context), path)
    return dict(context)


def environment_defaults_path(settings_dir: Path, environment: str) -> Path:
    """Location of the defaults file for ``environment``."""
    return settings_dir / f"deploy.{environment.lower()}.yml"


def load_manifest(path: Path) -> Manifest:
    """Load name/version from package.json or pyproject.toml.

    Raises:
        ConfigError: If the file is missing or cannot be parsed.
    """
    if not path.is_file():
        raise ConfigError(f"Manifest not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    if path.suffix == ".toml":
        try:
            doc = tomllib.loads(raw)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}") from e
        data = doc.get("project") or doc.get("tool", {}).get("poetry") or {}
    else:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected an object in {path}, got {type(data).__name__}")

    manifest = Manifest(
        name=str(data.get("name") or ""),
        version=str(data.get("version") or ""),
        description=str(data.get("description") or ""),
    )
    logger.debug("Loaded manifest %s@%s from %s", manifest.name, manifest.version, path)
    return manifest


def find_manifest(project_root: Path) -> Path | None:
    """Return the first manifest file present in ``project_root``."""
    for name in MANIFEST_FILES:
        candidate = project_root / name
        if candidate.is_file():
            return candidate
    return None


def parse_context_pairs(pairs: Iterable[str]) -> dict[str, str]:
    """Parse ``KEY=VALUE`` strings from the command line.

    Raises:
        ConfigError: If a pair has no ``=`` or an empty key.
    """
    result: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ConfigError(f"Invalid context value {pair!r}, expected KEY=VALUE")
        result[key] = value
    return result


def check_text_values(settings: dict[str, Any], path: Path) -> None:
    """Reject YAML scalars that were not read as text for string fields.

    Unquoted ``1.10`` loads as the float ``1.1`` and ``yes`` as ``True``;
    stringifying them later would silently change the operator's value.

    Raises:
        ConfigError: Naming the first offending key.
    """
    for key, value in settings.items():
        field = canonical_key(key)
        if field not in TEXT_FIELDS or value is None or isinstance(value, str):
            continue
        raise ConfigError(
            f"{key} in {path} must be a string, got {value!r} "
            f"({type(value).__name__}); quote the value, e.g. {key}: \"...\""
        )


def load_sources(
    config_path: Path | None = None,
    manifest_path: Path | None = None,
    cli_context: dict[str, Any] | None = None,
) -> LoadedSources:
    """Gather overrides and manifest from every layer.

    Args:
        config_path: Explicit settings file. If None, searches upward;
            a missing settings file is then not an error.
        manifest_path: Explicit manifest. If None, looks in the project root.
        cli_context: Values from ``--context`` flags (highest precedence).

    Raises:
        ConfigError: If an explicit file is missing or any file is malformed.
    """
    if config_path is not None and not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")

    settings_path = config_path or find_settings_file()
    project_root = settings_path.parent.resolve() if settings_path else Path.cwd()
    sources = LoadedSources(project_root=project_root, settings_path=settings_path)

    settings: dict[str, Any] = load_settings(settings_path) if settings_path else {}
    if settings_path:
        check_text_values(settings, settings_path)
    cli = dict(cli_context or {})

    # The environment picks the defaults file, so settle it first
    environment = first_present(
        normalize_overrides(cli).get("environment"),
        normalize_overrides(settings).get("environment"),
        DEFAULT_ENVIRONMENT,
    )
    env_defaults: dict[str, Any] = {}
    env_path = environment_defaults_path(project_root, str(environment))
    # An unusable environment name is reported by the resolver
    if is_valid_name_part(str(environment)) and env_path.is_file():
        env_defaults = load_settings(env_path)
        check_text_values(env_defaults, env_path)
        sources.env_defaults_path = env_path

    # Canonicalize per layer so an alias in a later layer still wins;
    # blank values never mask an earlier layer
    merged: dict[str, Any] = {}
    unknown: set[str] = set()
    for layer in (settings, env_defaults, cli):
        merged.update(normalize_overrides(layer))
        unknown.update(unknown_keys(layer))
    sources.unknown_keys = sorted(unknown)
    sources.overrides = merged

    if manifest_path is None:
        manifest_path = find_manifest(project_root)
    if manifest_path is not None:
        sources.manifest = load_manifest(manifest_path)
        sources.manifest_path = manifest_path
    else:
        logger.info("No manifest found in %s", project_root)

    logger.info(
        "Loaded configuration sources (settings=%s, environment=%s, manifest=%s)",
        settings_path, sources.env_defaults_path, sources.manifest_path,
    )
    return sources


def _read_yaml_mapping(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data
