"""
Tests for the naming/tagging policy — canonical ids and the shared tag set.
"""

import pytest

from deployconf.core.config import naming
from deployconf.core.config.resolver import resolve
from deployconf.core.models import DeploymentConfig


class TestCanonicalId:
    def test_lowercases_everything(self, prod_config):
        assert naming.canonical_id(prod_config, "ECR") == "prod-shop-ecr"

    def test_base_name(self, prod_config):
        assert naming.base_name(prod_config) == "prod-shop"

    def test_stack_prefix(self, prod_config):
        assert naming.stack_prefix(prod_config) == "prod-shop-"

    def test_suffixes(self, prod_config):
        assert naming.canonical_id(prod_config, naming.REGISTRY_STACK) == "prod-shop-ecr"
        assert naming.canonical_id(prod_config, naming.COMPUTE_STACK) == "prod-shop-ecs"
        assert (
            naming.canonical_id(prod_config, naming.OBSERVABILITY_STACK)
            == "prod-shop-observability"
        )
        assert (
            naming.canonical_id(prod_config, naming.REGISTRY_REPOSITORY)
            == "prod-shop-ecr-repository"
        )
        assert naming.canonical_id(prod_config, naming.CONTAINER) == "prod-shop-container"

    @pytest.mark.parametrize("suffix", ["", "   "])
    def test_blank_suffix_rejected(self, prod_config, suffix):
        with pytest.raises(ValueError):
            naming.canonical_id(prod_config, suffix)

    def test_environment_case_normalized(self):
        config = DeploymentConfig(project="Shop", environment="PROD", version="1")
        assert naming.canonical_id(config, "ecs") == "prod-shop-ecs"


class TestTags:
    def test_tag_pair(self, prod_config):
        assert naming.tags(prod_config) == {"project": "shop", "environment": "prod"}

    def test_independent_invocations_agree(self):
        """Two separate resolutions produce identical tags and prefixes."""
        a = resolve({"environment": "prod", "project": "Shop"}, {"version": "1"})
        b = resolve({"environment": "prod", "project": "Shop"}, {"version": "1"})
        assert naming.tags(a) == naming.tags(b) == {"project": "shop", "environment": "prod"}
        assert naming.stack_prefix(a) == naming.stack_prefix(b) == "prod-shop-"

    def test_returns_fresh_dict(self, prod_config):
        first = naming.tags(prod_config)
        first["project"] = "changed"
        assert naming.tags(prod_config)["project"] == "shop"


class TestUnitNames:
    def test_all_units_listed(self, prod_config):
        names = naming.unit_names(prod_config)
        assert list(names) == ["registry", "compute", "observability"]

    def test_values(self, prod_config):
        names = naming.unit_names(prod_config)
        assert names["registry"]["repository_name"] == "prod-shop-ecr-repository"
        assert names["compute"]["container_name"] == "prod-shop-container"
        assert names["observability"]["resource_group_name"] == "prod-shop"
        assert names["observability"]["resource_group_export"] == "prod-shop-resource-group"
        assert names["observability"]["app_monitor_name"] == "shop"

    def test_every_stack_id_shares_prefix(self, prod_config):
        prefix = naming.stack_prefix(prod_config)
        for entries in naming.unit_names(prod_config).values():
            assert entries["stack_id"].startswith(prefix)
