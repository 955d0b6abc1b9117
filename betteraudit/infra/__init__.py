"""Infrastructure layer for betteraudit.

This package contains file access, exceptions-configuration loading and the
external tool integrations (npm, node).
"""
from __future__ import annotations

__all__ = []
