"""Loading of the exceptions configuration.

The exceptions configuration is either a static JSON file (``.nsprc``) or an
executable ``.js``/``.ts`` module. Which loader applies is decided purely
from the path's extension.

Functions
---------
select_config_source : Map a path to its ConfigSourceKind
nsprc_reader : Return the (not yet invoked) loader for a path
read_nsprc : Invoke a loader and await its result
from_nsprc_file : Static file loader
from_config_file : Config module loader

Examples
--------
>>> strategy = nsprc_reader(".nsprc")
>>> strategy is from_nsprc_file
True
>>> nsprc = await read_nsprc(strategy, ".nsprc")  # doctest: +SKIP
"""
from __future__ import annotations

import inspect
from pathlib import Path
from types import MappingProxyType
from typing import Awaitable, Callable, Mapping, Optional, Union

from betteraudit.config import settings_from_env
from betteraudit.core.exceptions import UnsupportedConfigTypeError
from betteraudit.core.logging_config import get_logger
from betteraudit.core.models import ConfigSourceKind, NsprcResult
from betteraudit.infra import files
from betteraudit.infra.tools.node import NodeConfigModuleLoader

logger = get_logger(__name__)

DEFAULT_CONFIG_FILE = ".nsprc"

ReadNsprcStrategy = Callable[[str], Union[NsprcResult, Awaitable[NsprcResult]]]

_EXTENSION_KINDS: Mapping[str, ConfigSourceKind] = MappingProxyType({
    "nsprc": ConfigSourceKind.NSPRC_FILE,
    "js": ConfigSourceKind.CONFIG_MODULE,
    "ts": ConfigSourceKind.CONFIG_MODULE,
})


def from_nsprc_file(file_path: str) -> NsprcResult:
    """Read a static exceptions file. Returns False instead of raising."""
    return files.read_file(file_path)


async def from_config_file(
    file_path: str,
    loader: Optional[NodeConfigModuleLoader] = None,
) -> NsprcResult:
    """Load a config module resolved against the current working directory.

    Raises
    ------
    ConfigLoadError
        If the module cannot be loaded.
    """
    loader = loader or NodeConfigModuleLoader.from_settings(settings_from_env())
    module_path = Path.cwd() / file_path
    return await loader.load(module_path)


_STRATEGIES: Mapping[ConfigSourceKind, ReadNsprcStrategy] = MappingProxyType({
    ConfigSourceKind.NSPRC_FILE: from_nsprc_file,
    ConfigSourceKind.CONFIG_MODULE: from_config_file,
})


def select_config_source(file_path: str) -> ConfigSourceKind:
    """Classify a configuration path by the text after its last dot.

    Raises
    ------
    UnsupportedConfigTypeError
        For any extension other than ``nsprc``, ``js`` or ``ts``.

    Examples
    --------
    >>> select_config_source("path/to/.nsprc")
    <ConfigSourceKind.NSPRC_FILE: 'nsprc_file'>
    >>> select_config_source("audit.config.ts")
    <ConfigSourceKind.CONFIG_MODULE: 'config_module'>
    """
    extension = file_path.rsplit(".", 1)[-1]
    try:
        return _EXTENSION_KINDS[extension]
    except KeyError:
        raise UnsupportedConfigTypeError(file_path) from None


def nsprc_reader(file_path: str) -> ReadNsprcStrategy:
    return _STRATEGIES[select_config_source(file_path)]


async def read_nsprc(strategy: ReadNsprcStrategy, file_path: str) -> NsprcResult:
    """Run ``strategy`` once for ``file_path``, awaiting it if needed."""
    result = strategy(file_path)
    if inspect.isawaitable(result):
        result = await result
    if result is False:
        logger.debug("No exceptions configuration found at %s", file_path)
    return result
