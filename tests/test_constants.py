"""
Tests for ConfigManager.
"""

import json

from datatree.constants import (
    DEFAULT_INDENT_WIDTH,
    ConfigManager,
)


class TestConfigManager:
    """Test config loading with fallbacks."""

    def test_missing_file_uses_defaults(self, tmp_path):
        config = ConfigManager(config_path=tmp_path / "missing.json")

        assert config.get_key_mapping() == {"id": "id", "pid": "pid", "child": "child"}
        assert config.get_int("indent_width", DEFAULT_INDENT_WIDTH) == DEFAULT_INDENT_WIDTH

    def test_reads_values(self, tmp_path):
        path = tmp_path / "datatree.json"
        path.write_text(json.dumps({"id_key": "uuid", "child_key": "items", "indent_width": 4}))

        config = ConfigManager(config_path=path)

        assert config.get_key_mapping() == {"id": "uuid", "pid": "pid", "child": "items"}
        assert config.get_int("indent_width", DEFAULT_INDENT_WIDTH) == 4

    def test_invalid_json_falls_back(self, tmp_path):
        path = tmp_path / "datatree.json"
        path.write_text("{not json")

        config = ConfigManager(config_path=path)

        assert config.get("id_key") is None
        assert config.get_str("id_key", "id") == "id"

    def test_non_object_falls_back(self, tmp_path):
        path = tmp_path / "datatree.json"
        path.write_text("[1, 2]")

        assert ConfigManager(config_path=path).get("id_key", "id") == "id"

    def test_bad_int_falls_back(self, tmp_path):
        path = tmp_path / "datatree.json"
        path.write_text(json.dumps({"indent_width": "wide"}))

        assert ConfigManager(config_path=path).get_int("indent_width", 2) == 2
