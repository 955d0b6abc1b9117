"""Tests for the Typer CLI."""

from __future__ import annotations

import json
import logging
from typing import NoReturn, get_type_hints

import pytest
from typer.testing import CliRunner

from betteraudit.auditor_cli.cli import _fail, app
from betteraudit.core.logging_config import ROOT_LOGGER_NAME
from betteraudit.core.models import ResolvedInput, ToolRunResult
from betteraudit.infra.tools.npm import NpmTool

runner = CliRunner()


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def fake_npm(monkeypatch):
    calls = []

    def fake_audit(self, resolved, cwd=None):
        calls.append(resolved)
        return ToolRunResult(
            tool="npm",
            cmd=self.build_audit_cmd(resolved),
            cwd=".",
            returncode=calls_returncode[0],
            duration_s=0.1,
            stdout="found 0 vulnerabilities\n",
            stderr="",
        )

    calls_returncode = [0]
    monkeypatch.setattr(NpmTool, "audit", fake_audit)
    monkeypatch.setattr(NpmTool, "version", lambda self: "10.8.2")
    return calls, calls_returncode


def parse_json_output(output: str) -> dict:
    return json.loads(output[output.index("{"):])


class TestResolveCommand:
    def test_defaults(self):
        result = runner.invoke(app, ["resolve"])
        assert result.exit_code == 0, result.output
        assert parse_json_output(result.output) == {
            "audit_command": "npm audit",
            "audit_level": "info",
            "exception_ids": [],
            "ignored_modules": [""],
            "included_columns": [],
        }

    def test_flags(self, fake_npm, write_nsprc):
        write_nsprc({"1337": {"active": True}, "4501": {"active": False}})
        result = runner.invoke(
            app,
            [
                "resolve",
                "-p",
                "--registry", "https://registry.npmjs.org/",
                "-l", "high",
                "-x", "1567, 1902",
                "-m", "lodash,moment",
                "-i", "ID, Module",
            ],
        )
        assert result.exit_code == 0, result.output
        payload = parse_json_output(result.output)
        assert payload["audit_command"] == "npm audit --omit=dev --registry=https://registry.npmjs.org/"
        assert payload["audit_level"] == "high"
        assert payload["exception_ids"] == ["1567", "1902", "1337"]
        assert payload["ignored_modules"] == ["lodash", "moment"]
        assert payload["included_columns"] == ["ID", "Module"]

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("NPM_CONFIG_AUDIT_LEVEL", "critical")
        result = runner.invoke(app, ["resolve"])
        assert parse_json_output(result.output)["audit_level"] == "critical"

    def test_unsupported_config_file(self):
        result = runner.invoke(app, ["resolve", "--config-file", "audit.txt"])
        assert result.exit_code == 1
        assert "Unsupported file type" in result.output

    def test_missing_config_module(self):
        result = runner.invoke(app, ["resolve", "-c", "audit.config.js"])
        assert result.exit_code == 1
        assert "Failed to load config module" in result.output


class TestAuditCommand:
    def test_runs_npm_with_resolved_input(self, fake_npm):
        calls, _ = fake_npm
        result = runner.invoke(app, ["audit", "-x", "1567", "-l", "moderate"])
        assert result.exit_code == 0, result.output
        assert calls == [
            ResolvedInput(
                audit_command="npm audit",
                audit_level="moderate",
                exception_ids=["1567"],
                ignored_modules=[""],
                included_columns=[],
            )
        ]
        assert "found 0 vulnerabilities" in result.output
        assert "Accepted exceptions: 1567" in result.output

    def test_propagates_npm_exit_code(self, fake_npm):
        _, returncode = fake_npm
        returncode[0] = 1
        result = runner.invoke(app, ["audit"])
        assert result.exit_code == 1

    def test_summary_hides_placeholder_modules(self, fake_npm):
        result = runner.invoke(app, ["audit", "-m", "lodash,undefined,null"])
        assert result.exit_code == 0, result.output
        assert "Ignored modules: lodash\n" in result.output

    def test_config_error_skips_npm(self, fake_npm):
        calls, _ = fake_npm
        result = runner.invoke(app, ["audit", "-c", "exceptions.yaml"])
        assert result.exit_code == 1
        assert calls == []

    def test_invalid_settings(self, monkeypatch, fake_npm):
        monkeypatch.setenv("BETTERAUDIT_TIMEOUT_S", "never")
        result = runner.invoke(app, ["audit"])
        assert result.exit_code == 1
        assert "timeout_s" in result.output


class TestFail:
    def test_is_declared_as_never_returning(self):
        assert get_type_hints(_fail)["return"] is NoReturn
