"""Tests for things3-mcp configuration."""

import os
import pytest

from things3_mcp import config as config_module


class TestConfig:
    def test_defaults(self):
        from things3_mcp.config import Config
        assert Config.SERVER_NAME == "things3-mcp"
        assert Config.SERVER_VERSION == "0.2.0"
        assert Config.PROTOCOL_VERSION == "2024-11-05"
        assert Config.THINGS_APP == "Things3"
        assert Config.MAX_MESSAGE_BYTES == 2**20

    def test_ensure_dirs(self, tmp_data_dir):
        from things3_mcp.config import Config
        Config.ensure_dirs()
        assert Config.DATA_DIR.exists()
        assert Config.LOG_DIR.exists()

    def test_version_matches_package(self):
        from things3_mcp import __version__
        from things3_mcp.config import Config
        assert Config.SERVER_VERSION == __version__


class TestEnvFlag:
    @pytest.mark.parametrize("value,expected", [
        ("true", True), ("1", True), ("YES", True), ("on", True),
        ("false", False), ("0", False), ("no", False), ("", False),
    ])
    def test_values(self, monkeypatch, value, expected):
        monkeypatch.setenv("THINGS3_MCP_TEST_FLAG", value)
        assert config_module._env_flag("THINGS3_MCP_TEST_FLAG", not expected) is expected

    def test_unset_uses_default(self, monkeypatch):
        monkeypatch.delenv("THINGS3_MCP_TEST_FLAG", raising=False)
        assert config_module._env_flag("THINGS3_MCP_TEST_FLAG", True) is True
        assert config_module._env_flag("THINGS3_MCP_TEST_FLAG", False) is False


class TestConfigEnvFile:
    def test_config_env_loading(self, tmp_path, monkeypatch):
        """config.env values fill in unset variables only."""
        monkeypatch.setenv("THINGS3_MCP_DATA_DIR", str(tmp_path))
        (tmp_path / "config.env").write_text(
            "# Comment line\n"
            "THINGS3_MCP_TEST_VAR=hello_world\n"
            "\n"
            "THINGS3_MCP_TEST_QUOTED=\"quoted value\"\n"
            "export THINGS3_MCP_TEST_EXPORTED=yes\n"
            "THINGS3_MCP_TEST_SET=from_file\n"
            "not a pair\n"
        )
        for key in ("THINGS3_MCP_TEST_VAR", "THINGS3_MCP_TEST_QUOTED", "THINGS3_MCP_TEST_EXPORTED"):
            monkeypatch.delenv(key, raising=False)
        monkeypatch.setenv("THINGS3_MCP_TEST_SET", "from_env")

        try:
            config_module._load_config_env()

            assert os.environ.get("THINGS3_MCP_TEST_VAR") == "hello_world"
            assert os.environ.get("THINGS3_MCP_TEST_QUOTED") == "quoted value"
            assert os.environ.get("THINGS3_MCP_TEST_EXPORTED") == "yes"
            assert os.environ.get("THINGS3_MCP_TEST_SET") == "from_env"
        finally:
            for key in ("THINGS3_MCP_TEST_VAR", "THINGS3_MCP_TEST_QUOTED", "THINGS3_MCP_TEST_EXPORTED"):
                os.environ.pop(key, None)

    def test_missing_file_is_fine(self, tmp_path, monkeypatch):
        monkeypatch.setenv("THINGS3_MCP_DATA_DIR", str(tmp_path / "absent"))
        config_module._load_config_env()

    def test_read_config_env(self, tmp_path):
        path = tmp_path / "config.env"
        path.write_text(
            "A=1\n"
            "B = 'two words'\n"
            "C=\"unbalanced'\n"
            "=orphan\n"
            "D=\n"
        )
        assert config_module.read_config_env(path) == {
            "A": "1",
            "B": "two words",
            "C": "\"unbalanced'",
            "D": "",
        }

    def test_data_dir_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("THINGS3_MCP_DATA_DIR", str(tmp_path))
        assert config_module._data_dir() == tmp_path


class TestEnvNumber:
    def test_unset_uses_default(self, monkeypatch):
        monkeypatch.delenv("THINGS3_MCP_TEST_NUM", raising=False)
        assert config_module._env_number("THINGS3_MCP_TEST_NUM", 30.0, float) == 30.0

    def test_parses(self, monkeypatch):
        monkeypatch.setenv("THINGS3_MCP_TEST_NUM", " 2048 ")
        assert config_module._env_number("THINGS3_MCP_TEST_NUM", 1, int) == 2048

    def test_bad_value_names_the_variable(self, monkeypatch):
        monkeypatch.setenv("THINGS3_MCP_TEST_NUM", "soon")
        with pytest.raises(ValueError, match="THINGS3_MCP_TEST_NUM must be a number"):
            config_module._env_number("THINGS3_MCP_TEST_NUM", 1.0, float)
