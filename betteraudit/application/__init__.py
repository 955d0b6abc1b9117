"""Application layer for betteraudit.

This package contains the input resolution pipeline: exception merging and
the orchestration that produces the resolved execution context.
"""
from __future__ import annotations

from .exception_ids import active_config_ids, get_exception_ids
from .input_handler import build_audit_command, handle_input, resolve_input

__all__ = [
    "active_config_ids",
    "get_exception_ids",
    "build_audit_command",
    "handle_input",
    "resolve_input",
]
