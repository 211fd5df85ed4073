"""
Tests for use cases — resolve, config check, plan, synth.
"""

import json
from pathlib import Path

import pytest

from deployconf.core.use_cases.config_check import check_config
from deployconf.core.use_cases.plan import plan_units, synth_units
from deployconf.core.use_cases.resolve import deploy_target, resolve_deployment


class TestResolveDeployment:
    def test_from_files(self, settings_file: Path):
        result = resolve_deployment()
        assert result.ok
        config = result.config
        assert config.project == "Shop"
        assert config.environment == "staging"
        assert config.registry_repo_name == "acme/shop"
        assert config.desired_instance_count == 2

    def test_cli_context_wins(self, settings_file: Path):
        result = resolve_deployment(cli_context={"environment": "prod", "project": "Outlet"})
        assert result.config.environment == "prod"
        assert result.config.project == "Outlet"

    def test_to_dict(self, project_dir: Path):
        data = resolve_deployment().to_dict()
        assert data["config"]["project_slug"] == "shop"
        assert data["tags"] == {"project": "shop", "environment": "dev"}
        assert data["stack_prefix"] == "dev-shop-"
        assert data["sources"]["manifest_file"].endswith("package.json")

    def test_configuration_error_reported(self, project_dir: Path):
        result = resolve_deployment(cli_context={"ecrRepoName": "badname"})
        assert not result.ok
        assert result.error_field == "registry_repo_name"
        assert "registry_repo_name" in result.error
        assert result.to_dict()["field"] == "registry_repo_name"

    def test_file_error_reported(self, project_dir: Path):
        (project_dir / "deploy.yml").write_text(":: invalid: yaml: [")
        result = resolve_deployment()
        assert "Invalid YAML" in result.error
        assert result.error_field is None

    def test_idempotent(self, settings_file: Path):
        assert resolve_deployment().config == resolve_deployment().config


class TestDeployTarget:
    def test_from_environ(self):
        target = deploy_target({"CDK_DEFAULT_ACCOUNT": "1234", "CDK_DEFAULT_REGION": "us-east-1"})
        assert target.account == "1234"
        assert target.region == "us-east-1"

    def test_unset(self):
        target = deploy_target({})
        assert target.account is None
        assert target.region is None

    def test_process_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CDK_DEFAULT_REGION", "eu-central-1")
        assert deploy_target().region == "eu-central-1"


class TestCheckConfig:
    def test_valid(self, settings_file: Path):
        result = check_config()
        assert result.valid
        assert result.errors == []

    def test_warns_without_settings(self, project_dir: Path):
        result = check_config()
        assert result.valid
        assert any("No deploy.yml" in w for w in result.warnings)

    def test_warns_unknown_keys(self, project_dir: Path):
        result = check_config(cli_context={"region": "x"})
        assert any("region" in w for w in result.warnings)

    def test_warns_zero_instances(self, project_dir: Path):
        result = check_config(cli_context={"desiredCount": "0"})
        assert result.valid
        assert any("desired_instance_count is 0" in w for w in result.warnings)

    def test_warns_localhost_outside_dev(self, project_dir: Path):
        result = check_config(cli_context={"environment": "prod"})
        assert any("localhost" in w for w in result.warnings)

    def test_error_without_manifest(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        result = check_config()
        assert not result.valid
        assert any("project" in e for e in result.errors)
        assert any("No manifest" in w for w in result.warnings)

    def test_to_dict(self, settings_file: Path):
        data = check_config().to_dict()
        assert data["valid"] is True
        assert data["project"] == "Shop"
        assert data["environment"] == "staging"


class TestPlanUnits:
    def test_plans(self, settings_file: Path):
        result = plan_units()
        assert result.error is None
        assert [p.stack_id for p in result.plans] == [
            "staging-shop-ecr",
            "staging-shop-ecs",
            "staging-shop-observability",
        ]

    def test_target_from_env(self, project_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CDK_DEFAULT_ACCOUNT", "999")
        result = plan_units()
        assert all(p.target.account == "999" for p in result.plans)

    def test_unknown_unit(self, project_dir: Path):
        result = plan_units(units=["database"])
        assert "Unknown unit" in result.error
        assert result.to_dict() == {"error": result.error}

    def test_resolution_error(self, project_dir: Path):
        result = plan_units(cli_context={"desiredCount": "-2"})
        assert result.error is not None
        assert result.plans == []


class TestSynthUnits:
    def test_writes_files(self, settings_file: Path, project_dir: Path):
        result = synth_units()
        assert result.error is None
        assert len(result.written) == 3
        assert (project_dir / "plan.out" / "staging-shop-ecr.yml").is_file()

    def test_skips_existing(self, settings_file: Path):
        synth_units()
        result = synth_units()
        assert result.written == []
        assert len(result.skipped) == 3

    def test_overwrite(self, settings_file: Path):
        synth_units()
        result = synth_units(overwrite=True)
        assert len(result.written) == 3

    def test_custom_out_dir(self, project_dir: Path):
        result = synth_units(out_dir="build/plans")
        assert result.out_dir == project_dir / "build" / "plans"
        assert (project_dir / "build" / "plans" / "dev-shop-ecs.yml").is_file()

    def test_scoped_manifest_name_writes_nothing(self, project_dir: Path):
        (project_dir / "package.json").write_text(
            json.dumps({"name": "@acme/shop", "version": "1.0.0"})
        )
        result = synth_units()
        assert "project" in result.error
        assert result.written == []
        assert not (project_dir / "plan.out").exists()

    def test_scoped_manifest_name_with_override(self, project_dir: Path):
        (project_dir / "package.json").write_text(
            json.dumps({"name": "@acme/shop", "version": "1.0.0"})
        )
        result = synth_units(cli_context={"project": "shop"})
        assert result.error is None
        assert (project_dir / "plan.out" / "dev-shop-ecr.yml").is_file()
