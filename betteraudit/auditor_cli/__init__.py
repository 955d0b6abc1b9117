"""Command-line interface for betteraudit.

This package provides the CLI application built with Typer.

Modules
-------
cli : Main CLI implementation

Examples
--------
Run from command line:
    $ python -m betteraudit audit --exclude 1567
"""
from __future__ import annotations

from .cli import app

__all__ = ["app"]
