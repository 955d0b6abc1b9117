from __future__ import annotations

"""External tool wrappers.

Modules
-------
npm : npm version detection and audit execution
node : Out-of-process loader for ``.js``/``.ts`` config modules

See Also
--------
betteraudit.application.input_handler : Builds the audit command
"""

from .node import NodeConfigModuleLoader
from .npm import NpmTool, get_npm_version, get_production_only_option, parse_version


__all__ = [
    "NodeConfigModuleLoader",
    "NpmTool",
    "get_npm_version",
    "get_production_only_option",
    "parse_version",
]
