"""Unit tests for config.py."""

import json

import pytest

from config import CONFIG, ConfigManager

pytestmark = pytest.mark.unit


class TestConfigAccess:
    def test_table_defaults(self):
        config = ConfigManager()
        assert config.get("table.orientation") == "vertical"
        assert config.get("table.show_headers") == "none"
        assert config.get("table.class_prefix") == "data"
        assert config.get("table.add_header_classes") is False

    def test_get_default_for_missing_path(self):
        config = ConfigManager()
        assert config.get("table.nope", "fallback") == "fallback"
        assert config.get("table.class_prefix.deeper") is None

    def test_update_existing_key(self):
        config = ConfigManager()
        config.update("table.class_prefix", "c-")
        assert config.get("table.class_prefix") == "c-"

    def test_update_unknown_key_raises(self):
        config = ConfigManager()
        with pytest.raises(KeyError):
            config.update("table.unknown", 1)
        with pytest.raises(KeyError):
            config.update("nosection.key", 1)

    def test_set_nested_create(self):
        config = ConfigManager()
        config.set_nested("extra.sub.key", 5, create=True)
        assert config.get("extra.sub.key") == 5
        with pytest.raises(KeyError):
            config.set_nested("other.key", 1)

    def test_get_section_is_a_copy(self):
        config = ConfigManager()
        section = config.get_section("table")
        section["class_prefix"] = "changed"
        assert config.get("table.class_prefix") == "data"

    def test_to_json(self, tmp_path):
        config = ConfigManager()
        path = tmp_path / "config.json"
        text = config.to_json(filepath=str(path))
        assert json.loads(path.read_text()) == json.loads(text)
        assert json.loads(text)["table"]["orientation"] == "vertical"

    def test_global_instance(self):
        assert isinstance(CONFIG, ConfigManager)
        assert repr(ConfigManager()) == "ConfigManager(3 sections)"


class TestEnvOverrides:
    def test_string_override(self, monkeypatch):
        monkeypatch.setenv("TABLEVIEW_TABLE_CLASS_PREFIX", "col-")
        assert ConfigManager().get("table.class_prefix") == "col-"

    @pytest.mark.parametrize("raw,expected", [("true", True), ("0", False), ("Yes", True)])
    def test_bool_override(self, monkeypatch, raw, expected):
        monkeypatch.setenv("TABLEVIEW_TABLE_ADD_HEADER_CLASSES", raw)
        assert ConfigManager().get("table.add_header_classes") is expected

    def test_int_override(self, monkeypatch):
        monkeypatch.setenv("TABLEVIEW_LOGGING_BACKUP_COUNT", "9")
        assert ConfigManager().get("logging.backup_count") == 9

    def test_bad_override_warns_and_is_skipped(self, monkeypatch):
        monkeypatch.setenv("TABLEVIEW_TABLE_ADD_HEADER_CLASSES", "maybe")
        with pytest.warns(UserWarning, match="TABLEVIEW_TABLE_ADD_HEADER_CLASSES"):
            config = ConfigManager()
        assert config.get("table.add_header_classes") is False

    def test_unknown_key_warns(self, monkeypatch):
        monkeypatch.setenv("TABLEVIEW_TABLE_COLOR", "red")
        with pytest.warns(UserWarning):
            ConfigManager()


class TestValidate:
    def test_defaults_are_valid(self):
        is_valid, errors = ConfigManager().validate()
        assert is_valid
        assert errors == []

    def test_reports_each_problem(self):
        config = ConfigManager()
        config.update("table.orientation", "diagonal")
        config.update("table.show_headers", "middle")
        config.update("table.class_prefix", 5)
        config.update("logging.level", "LOUD")

        is_valid, errors = config.validate()
        assert not is_valid
        assert len(errors) == 4
