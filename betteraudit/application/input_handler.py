"""
Input resolution

Turns the user's flags, the environment and the exceptions configuration
into the single execution context used to run ``npm audit`` and render its
results.

The resolution:
- Builds the ``npm audit`` command (production-only flag, registry)
- Picks the audit level from the flag, ``NPM_CONFIG_AUDIT_LEVEL`` or ``info``
- Loads the exceptions configuration (``.nsprc`` or a config module)
- Merges configured and command-line exceptions
- Normalizes the module-ignore and include-columns lists

Example:
    Resolve flags and hand the values to a callback::

        await handle_input({"exclude": "1567,919"}, render)

Author: Anush Krishna
License: MIT
"""
from __future__ import annotations

import inspect
import os
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Union

from betteraudit.application.exception_ids import clean_ids, get_exception_ids
from betteraudit.core.logging_config import get_logger
from betteraudit.core.models import CommandOptions, ResolvedInput
from betteraudit.infra.nsprc import DEFAULT_CONFIG_FILE, nsprc_reader, read_nsprc
from betteraudit.infra.tools.npm import get_npm_version, get_production_only_option

logger = get_logger(__name__)

BASE_COMMAND = "npm audit"
AUDIT_LEVEL_ENV = "NPM_CONFIG_AUDIT_LEVEL"
DEFAULT_AUDIT_LEVEL = "info"

OptionsLike = Union[CommandOptions, Mapping[str, Any], None]
InputCallback = Callable[[str, str, List[str], List[str], List[str]], Union[None, Awaitable[None]]]


def coerce_options(options: OptionsLike) -> CommandOptions:
    if options is None:
        return CommandOptions()
    if isinstance(options, CommandOptions):
        return options
    return CommandOptions.model_validate(dict(options))


def build_audit_command(
    options: CommandOptions,
    npm_version_provider: Callable[[], str] = get_npm_version,
) -> str:
    """Build the ``npm audit`` command string.

    The npm version is only queried when ``production`` is set.

    Examples
    --------
    >>> build_audit_command(CommandOptions(registry="https://registry.npmjs.org/"))
    'npm audit --registry=https://registry.npmjs.org/'
    """
    tokens = [
        BASE_COMMAND,
        get_production_only_option(npm_version_provider()) if options.production else "",
        f"--registry={options.registry}" if options.registry else "",
    ]
    return " ".join(token for token in tokens if token)


def resolve_audit_level(options: CommandOptions, environ: Optional[Mapping[str, str]] = None) -> str:
    """Flag value, else ``NPM_CONFIG_AUDIT_LEVEL``, else ``info``. Not validated."""
    environ = os.environ if environ is None else environ
    return options.level or environ.get(AUDIT_LEVEL_ENV) or DEFAULT_AUDIT_LEVEL


def resolve_config_path(options: CommandOptions) -> str:
    return options.config_file or DEFAULT_CONFIG_FILE


def split_exceptions(value: Optional[str]) -> List[str]:
    return clean_ids((value or "").split(","))


def split_module_ignore(value: Optional[str]) -> List[str]:
    # Values are passed through untouched; an absent flag yields [""].
    return (value or "").split(",")


def split_include_columns(value: Optional[str]) -> List[str]:
    return clean_ids((value or "").split(","))


async def resolve_input(
    options: OptionsLike = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    npm_version_provider: Callable[[], str] = get_npm_version,
    now: Optional[datetime] = None,
) -> ResolvedInput:
    """Resolve user input into a ResolvedInput.

    Parameters
    ----------
    options : CommandOptions or Mapping, optional
        User flags. Mappings may use camelCase or snake_case keys.
    environ : Mapping[str, str], optional
        Environment to read the audit level from, defaults to ``os.environ``.
    npm_version_provider : Callable[[], str], optional
        Returns the installed npm version; only called for ``production``.
    now : datetime, optional
        Reference time for exception expiry.

    Returns
    -------
    ResolvedInput
        The resolved execution context.

    Raises
    ------
    UnsupportedConfigTypeError
        If the config file has an extension other than nsprc, js or ts.
    ConfigLoadError
        If a config module cannot be loaded.
    """
    opts = coerce_options(options)

    audit_command = build_audit_command(opts, npm_version_provider)
    audit_level = resolve_audit_level(opts, environ)

    config_path = resolve_config_path(opts)
    strategy = nsprc_reader(config_path)
    nsprc = await read_nsprc(strategy, config_path)

    exception_ids = get_exception_ids(nsprc, split_exceptions(opts.exclude), now=now)

    resolved = ResolvedInput(
        audit_command=audit_command,
        audit_level=audit_level,
        exception_ids=exception_ids,
        ignored_modules=split_module_ignore(opts.module_ignore),
        included_columns=split_include_columns(opts.include_columns),
    )
    logger.debug("Resolved input: %s", resolved.model_dump())
    return resolved


async def handle_input(
    options: OptionsLike,
    fn: InputCallback,
    **kwargs: Any,
) -> None:
    """Resolve ``options`` and call ``fn`` once with the five resolved values.

    ``fn`` receives (audit command, audit level, exception ids, ignored
    modules, included columns). A coroutine result is awaited. Keyword
    arguments are forwarded to :func:`resolve_input`.
    """
    resolved = await resolve_input(options, **kwargs)
    result = fn(*resolved.as_args())
    if inspect.isawaitable(result):
        await result
