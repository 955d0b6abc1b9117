"""Configuration management for betteraudit.

Modules
-------
settings : Environment and ``.env`` backed application settings

Examples
--------
>>> from betteraudit.config import load_settings
>>> settings = load_settings()
"""
from __future__ import annotations

from .settings import AppSettings, load_settings, settings_from_env

__all__ = [
    "AppSettings",
    "load_settings",
    "settings_from_env",
]
