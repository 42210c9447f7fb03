# file: tests/test_config.py

"""
Unit tests for configuration loading.
"""

import pytest

from hmqc.config import load_config, merge_config, get_default_config, DEFAULT_CONFIG_PATH
from hmqc.errors import ConfigurationError


class TestLoadConfig:

    def test_shipped_defaults(self):
        config = load_config()
        assert config["fec"]["reed_solomon"] == {"n": 255, "k": 223, "nsym": 32}
        assert config["layout"]["bits_per_module"] == 32
        assert config["metadata"]["strict_content_type"] is True

    def test_yaml_matches_hardcoded_defaults(self):
        assert load_config() == get_default_config()

    def test_override_file(self, tmp_path):
        path = tmp_path / "override.yaml"
        path.write_text("layout:\n  bits_per_module: 4\nfec:\n  type: reedsolo\n")

        config = load_config(str(path))

        assert config["layout"]["bits_per_module"] == 4
        assert config["fec"]["type"] == "reedsolo"
        assert config["fec"]["reed_solomon"]["nsym"] == 32

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(str(path)) == load_config()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot load config"):
            load_config(str(tmp_path / "missing.yaml"))

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError, match="must be a mapping"):
            load_config(str(path))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("fec: [unclosed\n")
        with pytest.raises(ConfigurationError):
            load_config(str(path))

    def test_default_path_exists(self):
        assert DEFAULT_CONFIG_PATH.endswith("default_config.yaml")


class TestMergeConfig:

    def test_deep_merge_leaves_base_untouched(self):
        base = {"a": {"b": 1, "c": 2}}
        merged = merge_config(base, {"a": {"c": 3}})
        assert merged == {"a": {"b": 1, "c": 3}}
        assert base == {"a": {"b": 1, "c": 2}}

    def test_scalar_replaces_mapping(self):
        assert merge_config({"a": {"b": 1}}, {"a": 5}) == {"a": 5}
