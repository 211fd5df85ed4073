"""
Tests for layered lookup — presence rules and override-key normalization.
"""

import pytest

from deployconf.core.config.layers import (
    canonical_key,
    first_present,
    is_present,
    normalize_overrides,
    unknown_keys,
)


class TestFirstPresent:
    def test_first_wins(self):
        assert first_present("a", "b") == "a"

    def test_skips_absent(self):
        assert first_present(None, "", "  ", "c") == "c"

    def test_none_when_all_absent(self):
        assert first_present(None, "") is None

    def test_strips_strings(self):
        assert first_present("  prod ") == "prod"

    @pytest.mark.parametrize("value", [0, False, "0"])
    def test_falsy_values_are_present(self, value):
        assert is_present(value)
        assert first_present(value, 99) == value


class TestNormalizeOverrides:
    def test_aliases_mapped(self):
        result = normalize_overrides({"desiredCount": 3, "domainName": "x.io"})
        assert result == {"desired_instance_count": 3, "monitored_domain": "x.io"}

    def test_unknown_dropped(self):
        assert normalize_overrides({"region": "us-east-1"}) == {}

    def test_empty(self):
        assert normalize_overrides(None) == {}
        assert normalize_overrides({}) == {}

    def test_alias_after_field_ignored(self):
        result = normalize_overrides({"monitored_domain": "a", "domainName": "b"})
        assert result == {"monitored_domain": "a"}

    def test_field_after_alias_wins(self):
        result = normalize_overrides({"domainName": "b", "monitored_domain": "a"})
        assert result == {"monitored_domain": "a"}

    def test_blank_field_name_does_not_block_alias(self):
        result = normalize_overrides({"registry_repo_name": "", "ecrRepoName": "acme/shop"})
        assert result == {"registry_repo_name": "acme/shop"}

    def test_blank_alias_does_not_block_field(self):
        result = normalize_overrides({"ecrImageTag": "  ", "registry_image_tag": "v1"})
        assert result == {"registry_image_tag": "v1"}

    def test_absent_values_dropped(self):
        assert normalize_overrides({"project": None, "version": ""}) == {}

    def test_canonical_key_passthrough(self):
        assert canonical_key("project") == "project"
        assert canonical_key("ecrImageTag") == "registry_image_tag"

    def test_unknown_keys_sorted(self):
        assert unknown_keys({"zeta": 1, "alpha": 2, "project": "x"}) == ["alpha", "zeta"]
