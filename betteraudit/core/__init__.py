"""Core domain logic for betteraudit.

This package contains the data models, exceptions and logging configuration.
"""
from __future__ import annotations

from .exceptions import (
    BetterAuditError,
    ConfigLoadError,
    ConfigurationError,
    FileSystemError,
    ToolExecutionError,
    UnsupportedConfigTypeError,
)

__all__ = [
    "BetterAuditError",
    "ConfigLoadError",
    "ConfigurationError",
    "FileSystemError",
    "ToolExecutionError",
    "UnsupportedConfigTypeError",
]
