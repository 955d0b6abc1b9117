from __future__ import annotations

"""Core data models.

Modules
-------
nsprc : Exceptions file models and expiry evaluation
options : CLI options and the resolved execution context
tool_run : External command results
"""

from .nsprc import (
    ConfigSourceKind,
    ExceptionConfig,
    ExceptionEntry,
    ExpiryStatus,
    NsprcResult,
    analyze_expiry,
    parse_expiry,
)
from .options import AUDIT_LEVELS, AuditLevel, CommandOptions, ResolvedInput
from .tool_run import ToolRunResult

__all__ = [
    "AUDIT_LEVELS",
    "AuditLevel",
    "CommandOptions",
    "ConfigSourceKind",
    "ExceptionConfig",
    "ExceptionEntry",
    "ExpiryStatus",
    "NsprcResult",
    "ResolvedInput",
    "ToolRunResult",
    "analyze_expiry",
    "parse_expiry",
]
