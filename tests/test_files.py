"""Tests for file utilities."""

from __future__ import annotations

import pytest

from betteraudit.core.exceptions import FileSystemError
from betteraudit.infra.files import find_project_root, read_file, safe_json_loads


class TestSafeJsonLoads:
    def test_parses_text(self):
        assert safe_json_loads('{"a": 1}') == {"a": 1}

    def test_parses_bytes(self):
        assert safe_json_loads(b'["x"]') == ["x"]

    def test_invalid_returns_default(self):
        assert safe_json_loads("{oops", default=False) is False

    def test_none_returns_default(self):
        assert safe_json_loads(None, default={}) == {}


class TestReadFile:
    def test_reads_object(self, write_nsprc, tmp_path):
        write_nsprc({"1337": {"active": True}})
        assert read_file(tmp_path / ".nsprc") == {"1337": {"active": True}}

    def test_missing_file(self, tmp_path):
        assert read_file(tmp_path / "nope" / ".nsprc") is False

    def test_directory_instead_of_file(self, tmp_path):
        (tmp_path / ".nsprc").mkdir()
        assert read_file(tmp_path / ".nsprc") is False

    def test_invalid_json(self, tmp_path):
        (tmp_path / ".nsprc").write_text("1337: true", encoding="utf-8")
        assert read_file(tmp_path / ".nsprc") is False

    def test_json_array_is_not_a_config(self, write_nsprc, tmp_path):
        write_nsprc(["1337"])
        assert read_file(tmp_path / ".nsprc") is False

    def test_invalid_utf8(self, tmp_path):
        (tmp_path / ".nsprc").write_bytes(b"\xff\xfe{}")
        assert read_file(tmp_path / ".nsprc") is False


class TestFindProjectRoot:
    def test_finds_nearest_package_json(self, tmp_path):
        (tmp_path / "package.json").write_text("{}", encoding="utf-8")
        nested = tmp_path / "src" / "lib"
        nested.mkdir(parents=True)
        assert find_project_root(nested) == tmp_path.resolve()

    def test_defaults_to_cwd(self, tmp_path):
        (tmp_path / "package.json").write_text("{}", encoding="utf-8")
        assert find_project_root() == tmp_path.resolve()

    def test_raises_when_missing(self, tmp_path, monkeypatch):
        real_exists = type(tmp_path).exists

        def exists(self):
            if self.name == "package.json":
                return False
            return real_exists(self)

        monkeypatch.setattr(type(tmp_path), "exists", exists)
        with pytest.raises(FileSystemError, match="Project root not found"):
            find_project_root(tmp_path)
