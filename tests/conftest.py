"""Root test configuration for betteraudit.

Every test runs inside an empty temporary working directory so that a stray
``.nsprc`` in the repository never leaks into the resolved exceptions, and
with the audit-level and BETTERAUDIT_* variables cleared.
"""

import json
import os
from pathlib import Path
from typing import Any, Callable

import pytest


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("NPM_CONFIG_AUDIT_LEVEL", raising=False)
    for key in list(os.environ):
        if key.startswith("BETTERAUDIT_"):
            monkeypatch.delenv(key, raising=False)
    return tmp_path


@pytest.fixture
def write_nsprc(tmp_path: Path) -> Callable[..., Path]:
    """Write a JSON exceptions file into the working directory."""

    def _write(data: Any, name: str = ".nsprc") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
