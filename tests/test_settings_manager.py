"""settings_manager tests"""

import json

from xdebug_toolkit.core import config
from xdebug_toolkit.managers.settings_manager import load_settings


def _write(path, data):
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
    return path


class TestLoadSettings:
    """loading and validating settings.json"""

    def test_missing_file_gives_defaults(self, tmp_path):
        settings = load_settings(tmp_path / "missing.json")
        assert settings == config.DEFAULT_SETTINGS

    def test_defaults_are_not_shared(self, tmp_path):
        settings = load_settings(tmp_path / "missing.json")
        settings["xdebug"]["restart_valet"] = True
        assert config.DEFAULT_SETTINGS["xdebug"]["restart_valet"] is False

    def test_values_override_defaults(self, tmp_path):
        path = _write(tmp_path / "settings.json", {
            "valet_binary": "/opt/valet",
            "xdebug": {"restart_valet": True, "restart_timeout": 30},
        })
        settings = load_settings(path)

        assert settings["valet_binary"] == "/opt/valet"
        assert settings["php_binary"] == config.PHP_BINARY
        assert settings["xdebug"] == {"restart_valet": True, "restart_timeout": 30}

    def test_malformed_json_gives_defaults(self, tmp_path):
        path = _write(tmp_path / "settings.json", "{not json")
        assert load_settings(path) == config.DEFAULT_SETTINGS

    def test_non_object_gives_defaults(self, tmp_path):
        path = _write(tmp_path / "settings.json", [1, 2])
        assert load_settings(path) == config.DEFAULT_SETTINGS

    def test_wrong_types_are_ignored(self, tmp_path):
        path = _write(tmp_path / "settings.json", {
            "php_binary": "",
            "valet_binary": 5,
            "xdebug": {"restart_valet": "yes", "restart_timeout": -1},
            "unknown": True,
        })
        settings = load_settings(path)

        assert settings["php_binary"] == config.PHP_BINARY
        assert settings["valet_binary"] == config.VALET_BINARY
        assert settings["xdebug"] == {"restart_valet": False, "restart_timeout": None}
        assert "unknown" not in settings

    def test_xdebug_section_must_be_object(self, tmp_path):
        path = _write(tmp_path / "settings.json", {"xdebug": True})
        assert load_settings(path)["xdebug"] == config.DEFAULT_SETTINGS["xdebug"]

    def test_default_location(self, tmp_path, monkeypatch):
        path = _write(tmp_path / "settings.json", {"xdebug": {"restart_valet": True}})
        monkeypatch.setattr(config, "SETTINGS_FILE", path)
        assert load_settings()["xdebug"]["restart_valet"] is True
