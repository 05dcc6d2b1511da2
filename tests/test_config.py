"""Tests for settings loading from the environment and YAML files."""

import pytest

from sgf_service.config import (
    DEFAULT_MAX_SGF_BYTES,
    ServiceSettings,
    load_settings,
    load_yaml_settings,
)
from sgf_service.errors import ConfigurationError, ErrorKind


class TestDefaults:
    def test_empty_environment(self):
        settings = load_settings({})
        assert settings == ServiceSettings()
        assert settings.max_sgf_bytes == DEFAULT_MAX_SGF_BYTES == 102400
        assert settings.max_board_size == 361
        assert settings.max_move_index == 1000
        assert settings.port == 8002
        assert settings.cors_origins == ("*",)

    def test_settings_are_frozen(self):
        with pytest.raises(AttributeError):
            ServiceSettings().port = 9000  # type: ignore[misc]


class TestEnvironment:
    def test_overrides(self):
        settings = load_settings({
            "SGF_SERVICE_MAX_SGF_BYTES": "2048",
            "SGF_SERVICE_MAX_BOARD_SIZE": "19",
            "SGF_SERVICE_MAX_MOVE_INDEX": "500",
            "SGF_SERVICE_LOG_LEVEL": "debug",
            "SGF_SERVICE_PORT": "9100",
            "CORS_ORIGINS": "http://a.example, http://b.example",
        })
        assert settings.max_sgf_bytes == 2048
        assert settings.max_board_size == 19
        assert settings.max_move_index == 500
        assert settings.log_level == "debug"
        assert settings.port == 9100
        assert settings.cors_origins == ("http://a.example", "http://b.example")

    def test_empty_value_is_ignored(self):
        assert load_settings({"SGF_SERVICE_PORT": ""}).port == 8002

    def test_non_integer(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings({"SGF_SERVICE_MAX_SGF_BYTES": "lots"})
        assert "SGF_SERVICE_MAX_SGF_BYTES" in exc_info.value.message
        assert exc_info.value.kind == ErrorKind.UNEXPECTED_ERROR

    @pytest.mark.parametrize(
        "env",
        [
            {"SGF_SERVICE_MAX_SGF_BYTES": "0"},
            {"SGF_SERVICE_MAX_BOARD_SIZE": "362"},
            {"SGF_SERVICE_MAX_BOARD_SIZE": "0"},
            {"SGF_SERVICE_MAX_MOVE_INDEX": "-1"},
            {"SGF_SERVICE_LOG_LEVEL": "chatty"},
        ],
    )
    def test_out_of_range(self, env):
        with pytest.raises(ConfigurationError):
            load_settings(env)


class TestYamlFile:
    def test_file_values(self, tmp_path):
        path = tmp_path / "sgf.yaml"
        path.write_text(
            "max_sgf_bytes: 4096\n"
            "max_board_size: 25\n"
            "cors_origins:\n"
            "  - http://a.example\n"
        )
        settings = load_settings({"SGF_SERVICE_CONFIG": str(path)})
        assert settings.max_sgf_bytes == 4096
        assert settings.max_board_size == 25
        assert settings.cors_origins == ("http://a.example",)

    def test_environment_wins_over_file(self, tmp_path):
        path = tmp_path / "sgf.yaml"
        path.write_text("max_sgf_bytes: 4096\nport: 9000\n")
        settings = load_settings({
            "SGF_SERVICE_CONFIG": str(path),
            "SGF_SERVICE_MAX_SGF_BYTES": "8192",
        })
        assert settings.max_sgf_bytes == 8192
        assert settings.port == 9000

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_yaml_settings(path) == {}

    def test_unknown_setting(self, tmp_path):
        path = tmp_path / "sgf.yaml"
        path.write_text("max_zoom: 3\n")
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings({"SGF_SERVICE_CONFIG": str(path)})
        assert "max_zoom" in exc_info.value.message

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "sgf.yaml"
        path.write_text("- one\n- two\n")
        with pytest.raises(ConfigurationError):
            load_yaml_settings(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "sgf.yaml"
        path.write_text("max_sgf_bytes: [unclosed\n")
        with pytest.raises(ConfigurationError):
            load_yaml_settings(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_settings({"SGF_SERVICE_CONFIG": str(tmp_path / "absent.yaml")})
