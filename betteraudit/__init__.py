"""betteraudit - npm audit with accepted exceptions.

betteraudit wraps ``npm audit``: it turns command-line flags, the
``NPM_CONFIG_AUDIT_LEVEL`` environment variable and a project exceptions
file (``.nsprc``, or a ``.js``/``.ts`` config module) into the npm command to
run and the list of finding ids to accept.

Examples
--------
Run an audit from the command line:
    $ python -m betteraudit audit --level high --exclude 1567,919

Resolve the execution context from Python:
    >>> import asyncio
    >>> from betteraudit.application import resolve_input
    >>> asyncio.run(resolve_input({"registry": "https://registry.npmjs.org/"}))  # doctest: +SKIP

See Also
--------
betteraudit.auditor_cli.cli : Command-line interface
betteraudit.application : Input resolution pipeline
betteraudit.core : Core domain models and exceptions
"""
from __future__ import annotations

__version__ = "1.0.0"
__author__ = "Anush Krishna"
__license__ = "MIT"

__all__ = ["__version__", "__author__", "__license__"]
