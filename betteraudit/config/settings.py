# Copyright (c) 2025 Anush Krishna
# Licensed under the MIT License. See LICENSE file in the project root.

"""Application settings for betteraudit.

Settings come from environment variables prefixed with ``BETTERAUDIT_``,
optionally seeded from a ``.env`` file through python-dotenv.

Environment Variables
---------------------
BETTERAUDIT_LOG_LEVEL
    Console log level (default ``INFO``).
BETTERAUDIT_LOG_FILE
    Rotating log file path. Unset disables file logging.
BETTERAUDIT_NPM_BIN
    npm executable (default ``npm``).
BETTERAUDIT_NODE_BIN
    node executable used to load ``.js``/``.ts`` config modules (default ``node``).
BETTERAUDIT_TIMEOUT_S
    Per-process timeout in seconds (default ``300``).

Examples
--------
>>> settings = load_settings()
>>> settings.npm_bin
'npm'
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from betteraudit.core.exceptions import ConfigurationError

ENV_PREFIX = "BETTERAUDIT_"
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True, slots=True)
class AppSettings:
    """Strongly-typed application settings."""

    log_level: str = "INFO"
    log_file: Optional[Path] = None
    npm_bin: str = "npm"
    node_bin: str = "node"
    timeout_s: int = 300


def _normalize_path(raw: Optional[str]) -> Optional[Path]:
    if raw is None:
        return None
    raw = raw.strip()
    if not raw:
        return None
    return Path(raw).expanduser().resolve()


def _env(environ: Mapping[str, str], name: str, default: str) -> str:
    value = environ.get(f"{ENV_PREFIX}{name}")
    if value is None or not value.strip():
        return default
    return value.strip()


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> AppSettings:
    """
    Build settings from an environment mapping without touching ``.env``.

    Args:
        environ: Mapping to read from, defaults to ``os.environ``

    Returns:
        AppSettings instance

    Raises:
        ConfigurationError: If a value is present but invalid
    """
    environ = os.environ if environ is None else environ

    log_level = _env(environ, "LOG_LEVEL", "INFO").upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ConfigurationError("log_level", f"Invalid log level: {log_level}")

    timeout_raw = _env(environ, "TIMEOUT_S", "300")
    try:
        timeout_s = int(timeout_raw)
    except ValueError:
        raise ConfigurationError("timeout_s", f"Expected an integer, got {timeout_raw!r}")
    if timeout_s < 1:
        raise ConfigurationError("timeout_s", f"timeout_s must be >= 1, got {timeout_s}")

    return AppSettings(
        log_level=log_level,
        log_file=_normalize_path(environ.get(f"{ENV_PREFIX}LOG_FILE")),
        npm_bin=_env(environ, "NPM_BIN", "npm"),
        node_bin=_env(environ, "NODE_BIN", "node"),
        timeout_s=timeout_s,
    )


def load_settings(dotenv_path: str | Path | None = None, *, override: bool = False) -> AppSettings:
    """
    Load application settings from ``.env`` and the environment.

    Parameters
    ----------
    dotenv_path:
        Optional custom .env file location. When omitted python-dotenv falls back to the default search.
    override:
        When True, environment values already present will be overridden by the ones defined in the .env file.
    """
    load_dotenv(dotenv_path, override=override)
    return settings_from_env()
