"""
Shared test fixtures and configuration.
"""

import json
import textwrap
from pathlib import Path

import pytest

from deployconf.core.models import DeploymentConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's deployment environment out of every test."""
    for name in (
        "CDK_DEFAULT_ACCOUNT",
        "CDK_DEFAULT_REGION",
        "DEPLOYCONF_LOG_LEVEL",
        "DEPLOYCONF_LOG_FILE",
        "DEPLOYCONF_LOG_FILE_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An isolated project root with a package.json, used as cwd."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "package.json").write_text(
        json.dumps({"name": "Shop", "version": "2.3.0"}), encoding="utf-8"
    )
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def settings_file(project_dir: Path) -> Path:
    """A deploy.yml with a few overrides under ``context:``."""
    path = project_dir / "deploy.yml"
    path.write_text(textwrap.dedent("""\
        context:
          environment: staging
          ecrRepoName: acme/shop
          desiredCount: 2
    """))
    return path


@pytest.fixture
def prod_config() -> DeploymentConfig:
    """A fully resolved record for environment 'prod', project 'Shop'."""
    return DeploymentConfig(
        project="Shop",
        environment="prod",
        version="2.3.0",
        registry_repo_name="acme/shop",
        registry_image_tag="v2.3.0",
        monitored_domain="shop.example.com",
        desired_instance_count=3,
    )
