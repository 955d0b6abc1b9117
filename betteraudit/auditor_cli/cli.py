"""betteraudit CLI - Command Line Interface.

Synopsis
--------
audit
    Resolve flags and exceptions, then run ``npm audit``
resolve
    Print the resolved execution context as JSON without running npm

Options
-------
Shared by both commands:
    --exclude, -x
        Comma-separated finding ids to accept
    --module-ignore, -m
        Comma-separated module names to ignore
    --level, -l
        Minimum severity: info, low, moderate, high, critical
    --production, -p
        Only audit production dependencies
    --registry, -r
        npm registry URL
    --include-columns, -i
        Comma-separated result columns to display
    --config-file, -c
        Exceptions file (.nsprc) or config module (.js/.ts)
    --debug
        Enable debug logging
    --log-file
        Also write logs to this rotating file

Examples
--------
Run an audit that accepts two advisories:
    $ betteraudit audit -x 1567,919 -l high

Inspect the resolved command:
    $ betteraudit resolve -p --registry https://registry.npmjs.org/

Author: Anush Krishna
License: MIT
"""
from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import List, NoReturn, Optional

import typer

from betteraudit.application.input_handler import handle_input, resolve_input
from betteraudit.config import AppSettings, load_settings
from betteraudit.core.exceptions import BetterAuditError
from betteraudit.core.logging_config import setup_logging
from betteraudit.core.models import AUDIT_LEVELS, CommandOptions, ResolvedInput
from betteraudit.infra.tools.npm import NpmTool

app = typer.Typer(
    help="betteraudit - npm audit with accepted exceptions",
    add_completion=False,
)

# Placeholders some shells and npm scripts produce for unset variables.
_BLANK_MODULES = {"", "undefined", "null"}

ExcludeOpt = typer.Option(None, "--exclude", "-x", help="Exceptions or vulnerabilities ID(s) to exclude")
ModuleIgnoreOpt = typer.Option(None, "--module-ignore", "-m", help="Names of modules to ignore")
LevelOpt = typer.Option(
    None, "--level", "-l", help=f"The minimum audit level to validate ({', '.join(AUDIT_LEVELS)})"
)
ProductionOpt = typer.Option(False, "--production", "-p", help="Skip checking the devDependencies")
RegistryOpt = typer.Option(None, "--registry", "-r", help="The npm registry url to use")
IncludeColumnsOpt = typer.Option(
    None, "--include-columns", "-i", help="Columns to include in report (e.g. ID,Module,Title)"
)
ConfigFileOpt = typer.Option(
    None, "--config-file", "-c", help="Exceptions file (.nsprc) or config module (.js/.ts)"
)
DebugOpt = typer.Option(False, "--debug", help="Enable debug logging")
LogFileOpt = typer.Option(None, "--log-file", help="Write logs to this file")


def _init(debug: bool, log_file: Optional[Path]) -> AppSettings:
    try:
        settings = load_settings()
    except BetterAuditError as exc:
        _fail(exc)
    setup_logging(
        log_level="DEBUG" if debug else settings.log_level,
        log_file=log_file or settings.log_file,
    )
    return settings


def _fail(exc: BetterAuditError) -> NoReturn:
    typer.secho(exc.message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _build_options(
    exclude: Optional[str],
    module_ignore: Optional[str],
    level: Optional[str],
    production: bool,
    registry: Optional[str],
    include_columns: Optional[str],
    config_file: Optional[str],
) -> CommandOptions:
    return CommandOptions(
        exclude=exclude,
        module_ignore=module_ignore,
        level=level,
        production=production,
        registry=registry,
        include_columns=include_columns,
        config_file=config_file,
    )


def _print_summary(resolved: ResolvedInput) -> None:
    if resolved.exception_ids:
        typer.echo(f"Accepted exceptions: {', '.join(resolved.exception_ids)}", err=True)
    modules = [m for m in resolved.ignored_modules if m.strip() not in _BLANK_MODULES]
    if modules:
        typer.echo(f"Ignored modules: {', '.join(modules)}", err=True)
    if resolved.included_columns:
        typer.echo(f"Columns: {', '.join(resolved.included_columns)}", err=True)


@app.command("audit")
def audit(
    exclude: Optional[str] = ExcludeOpt,
    module_ignore: Optional[str] = ModuleIgnoreOpt,
    level: Optional[str] = LevelOpt,
    production: bool = ProductionOpt,
    registry: Optional[str] = RegistryOpt,
    include_columns: Optional[str] = IncludeColumnsOpt,
    config_file: Optional[str] = ConfigFileOpt,
    debug: bool = DebugOpt,
    log_file: Optional[Path] = LogFileOpt,
) -> None:
    """Run npm audit with the resolved flags and exceptions.

    The exit code is the one npm returns for the chosen audit level.
    """
    settings = _init(debug, log_file)
    npm = NpmTool.from_settings(settings)
    options = _build_options(
        exclude, module_ignore, level, production, registry, include_columns, config_file
    )
    exit_codes: List[int] = []

    def run_audit(
        audit_command: str,
        audit_level: str,
        exception_ids: List[str],
        ignored_modules: List[str],
        included_columns: List[str],
    ) -> None:
        resolved = ResolvedInput(
            audit_command=audit_command,
            audit_level=audit_level,
            exception_ids=exception_ids,
            ignored_modules=ignored_modules,
            included_columns=included_columns,
        )
        _print_summary(resolved)
        result = npm.audit(resolved)
        if result.stdout:
            typer.echo(result.stdout, nl=not result.stdout.endswith("\n"))
        if result.stderr:
            typer.echo(result.stderr, err=True, nl=not result.stderr.endswith("\n"))
        exit_codes.append(result.returncode)

    try:
        asyncio.run(handle_input(options, run_audit, npm_version_provider=npm.version))
    except BetterAuditError as exc:
        _fail(exc)

    code = exit_codes[0] if exit_codes else 1
    if code != 0:
        raise typer.Exit(code=code)


@app.command("resolve")
def resolve(
    exclude: Optional[str] = ExcludeOpt,
    module_ignore: Optional[str] = ModuleIgnoreOpt,
    level: Optional[str] = LevelOpt,
    production: bool = ProductionOpt,
    registry: Optional[str] = RegistryOpt,
    include_columns: Optional[str] = IncludeColumnsOpt,
    config_file: Optional[str] = ConfigFileOpt,
    debug: bool = DebugOpt,
    log_file: Optional[Path] = LogFileOpt,
) -> None:
    """Print the resolved command, level and exceptions as JSON."""
    settings = _init(debug, log_file)
    npm = NpmTool.from_settings(settings)
    options = _build_options(
        exclude, module_ignore, level, production, registry, include_columns, config_file
    )
    try:
        resolved = asyncio.run(resolve_input(options, npm_version_provider=npm.version))
    except BetterAuditError as exc:
        _fail(exc)
    typer.echo(json.dumps(resolved.model_dump(), ensure_ascii=False, indent=2))
