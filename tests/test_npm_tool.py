"""Tests for the npm wrapper and version handling."""

from __future__ import annotations

import subprocess
from types import SimpleNamespace

import pytest

from betteraudit.config import AppSettings
from betteraudit.core.exceptions import ToolExecutionError
from betteraudit.core.models import ResolvedInput, ToolRunResult
from betteraudit.infra.tools import npm as npm_module
from betteraudit.infra.tools.npm import NpmTool, get_production_only_option, parse_version


def completed(returncode=0, stdout="", stderr=""):
    return SimpleNamespace(returncode=returncode, stdout=stdout, stderr=stderr)


class TestParseVersion:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("8.13.2", (8, 13, 2)),
            ("10.8.2\n", (10, 8, 2)),
            ("v9", (9, 0, 0)),
            ("9.0.0-pre.1", (9, 0, 0)),
            ("", None),
            ("unknown", None),
        ],
    )
    def test_parse(self, text, expected):
        assert parse_version(text) == expected


class TestProductionOption:
    @pytest.mark.parametrize("version", ["6.14.4", "7.24.0", "8.13.2"])
    def test_legacy_versions(self, version):
        assert get_production_only_option(version) == "--production"

    @pytest.mark.parametrize("version", ["8.13.3", "8.14.0", "9.0.0", "10.8.2"])
    def test_newer_versions(self, version):
        assert get_production_only_option(version) == "--omit=dev"


class TestNpmTool:
    def test_from_settings(self):
        tool = NpmTool.from_settings(AppSettings(npm_bin="/usr/local/bin/npm", timeout_s=42))
        assert tool.npm_bin == "/usr/local/bin/npm"
        assert tool.timeout_s == 42

    def test_build_audit_cmd(self):
        tool = NpmTool(npm_bin="/usr/local/bin/npm")
        resolved = ResolvedInput(
            audit_command="npm audit --omit=dev --registry=https://r.example/",
            audit_level="moderate",
        )
        assert tool.build_audit_cmd(resolved) == [
            "/usr/local/bin/npm",
            "audit",
            "--omit=dev",
            "--registry=https://r.example/",
            "--audit-level=moderate",
        ]

    def test_version(self, monkeypatch):
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append(cmd)
            return completed(stdout="10.8.2\n")

        monkeypatch.setattr(subprocess, "run", fake_run)
        assert NpmTool().version() == "10.8.2"
        assert calls == [["npm", "--version"]]

    def test_version_failure(self, monkeypatch):
        monkeypatch.setattr(subprocess, "run", lambda cmd, **kw: completed(returncode=1, stderr="boom"))
        with pytest.raises(ToolExecutionError) as excinfo:
            NpmTool().version()
        assert excinfo.value.details == {"stderr": "boom", "tool": "npm"}

    def test_missing_executable(self, monkeypatch):
        def fake_run(cmd, **kwargs):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(subprocess, "run", fake_run)
        with pytest.raises(ToolExecutionError, match="executable not found"):
            NpmTool().version()

    def test_timeout_is_synthesized(self, monkeypatch):
        def fake_run(cmd, **kwargs):
            raise subprocess.TimeoutExpired(cmd, kwargs["timeout"], output=b"partial")

        monkeypatch.setattr(subprocess, "run", fake_run)
        result = NpmTool(timeout_s=5)._run(["npm", "audit"])
        assert result.timed_out
        assert result.stdout == "partial"
        assert "[TIMEOUT after 5s]" in result.stderr

    def test_audit_runs_in_project_root(self, monkeypatch, tmp_path):
        (tmp_path / "package.json").write_text("{}", encoding="utf-8")
        nested = tmp_path / "packages" / "app"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        seen = {}

        def fake_run(cmd, **kwargs):
            seen["cmd"] = cmd
            seen["cwd"] = kwargs["cwd"]
            return completed(returncode=1, stdout="found 1 high severity vulnerability\n")

        monkeypatch.setattr(subprocess, "run", fake_run)
        result = NpmTool().audit(ResolvedInput(audit_command="npm audit", audit_level="high"))
        assert isinstance(result, ToolRunResult)
        assert result.returncode == 1
        assert seen == {"cmd": ["npm", "audit", "--audit-level=high"], "cwd": str(tmp_path.resolve())}

    def test_get_npm_version_uses_tool(self, monkeypatch):
        monkeypatch.setattr(NpmTool, "version", lambda self: "8.13.2")
        assert npm_module.get_npm_version() == "8.13.2"
