"""Tests for application settings."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from betteraudit.config import AppSettings, load_settings, settings_from_env
from betteraudit.core.exceptions import ConfigurationError


class TestSettingsFromEnv:
    def test_defaults(self):
        assert settings_from_env({}) == AppSettings()

    def test_overrides(self, tmp_path):
        settings = settings_from_env({
            "BETTERAUDIT_LOG_LEVEL": "debug",
            "BETTERAUDIT_LOG_FILE": str(tmp_path / "logs" / "audit.log"),
            "BETTERAUDIT_NPM_BIN": "pnpm",
            "BETTERAUDIT_NODE_BIN": "/opt/node/bin/node",
            "BETTERAUDIT_TIMEOUT_S": "30",
        })
        assert settings.log_level == "DEBUG"
        assert settings.log_file == (tmp_path / "logs" / "audit.log").resolve()
        assert settings.npm_bin == "pnpm"
        assert settings.node_bin == "/opt/node/bin/node"
        assert settings.timeout_s == 30

    def test_blank_values_fall_back(self):
        settings = settings_from_env({"BETTERAUDIT_NPM_BIN": "  ", "BETTERAUDIT_LOG_FILE": ""})
        assert settings.npm_bin == "npm"
        assert settings.log_file is None

    def test_invalid_log_level(self):
        with pytest.raises(ConfigurationError) as excinfo:
            settings_from_env({"BETTERAUDIT_LOG_LEVEL": "LOUD"})
        assert excinfo.value.config_key == "log_level"

    @pytest.mark.parametrize("value", ["abc", "0", "-5"])
    def test_invalid_timeout(self, value):
        with pytest.raises(ConfigurationError):
            settings_from_env({"BETTERAUDIT_TIMEOUT_S": value})


class TestLoadSettings:
    def test_reads_dotenv(self, tmp_path: Path, monkeypatch):
        dotenv = tmp_path / ".env"
        dotenv.write_text("BETTERAUDIT_NPM_BIN=npm10\n", encoding="utf-8")
        monkeypatch.delenv("BETTERAUDIT_NPM_BIN", raising=False)
        try:
            assert load_settings(dotenv).npm_bin == "npm10"
        finally:
            os.environ.pop("BETTERAUDIT_NPM_BIN", None)

    def test_environment_wins_without_override(self, tmp_path: Path, monkeypatch):
        dotenv = tmp_path / ".env"
        dotenv.write_text("BETTERAUDIT_NPM_BIN=npm10\n", encoding="utf-8")
        monkeypatch.setenv("BETTERAUDIT_NPM_BIN", "npm9")
        assert load_settings(dotenv).npm_bin == "npm9"
