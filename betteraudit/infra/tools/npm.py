"""Wrapper around the npm CLI.

This module adapts the command-runner pattern used for every external tool:
build an argv, run it with a timeout, and package the outcome as a
ToolRunResult. npm is used for two things: detecting its version (which
decides the production-only flag) and running the audit itself.

Examples
--------
>>> tool = NpmTool()
>>> tool.version()  # doctest: +SKIP
'10.8.2'
"""
from __future__ import annotations

import os
import re
import shlex
import subprocess
import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union, cast

from betteraudit.config import AppSettings
from betteraudit.core.exceptions import FileSystemError, ToolExecutionError
from betteraudit.core.logging_config import get_logger
from betteraudit.core.models import ResolvedInput, ToolRunResult
from betteraudit.infra.files import find_project_root

logger = get_logger(__name__)

#: last npm release that only understands ``--production``
LEGACY_PRODUCTION_MAX_VERSION: Tuple[int, int, int] = (8, 13, 2)
LEGACY_PRODUCTION_FLAG = "--production"
OMIT_DEV_FLAG = "--omit=dev"

_VERSION_RE = re.compile(r"(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def parse_version(text: str) -> Optional[Tuple[int, int, int]]:
    """
    Parse a semver-ish version into a (major, minor, patch) tuple.

    Missing components count as zero; pre-release and build suffixes are
    ignored. Returns None when no version number is found.

    Examples
    --------
    >>> parse_version("8.13.2")
    (8, 13, 2)
    >>> parse_version("v10.2.0-pre.1")
    (10, 2, 0)
    """
    match = _VERSION_RE.search(text or "")
    if not match:
        return None
    return cast(
        Tuple[int, int, int],
        tuple(int(part) if part else 0 for part in match.groups()),
    )


def get_production_only_option(npm_version: str) -> str:
    """Return the npm audit flag that restricts the audit to production deps."""
    parsed = parse_version(npm_version)
    if parsed is not None and parsed <= LEGACY_PRODUCTION_MAX_VERSION:
        return LEGACY_PRODUCTION_FLAG
    return OMIT_DEV_FLAG


class NpmTool:
    """Runs npm commands.

    Parameters
    ----------
    npm_bin : str, optional
        npm executable. Default is ``npm``.
    timeout_s : int, optional
        Process timeout in seconds. Default is DEFAULT_TIMEOUT_S (300).
    env : Dict[str, str], optional
        Additional environment variables. Default is None.

    Examples
    --------
    >>> tool = NpmTool(timeout_s=600)
    >>> tool.build_audit_cmd(ResolvedInput(audit_command="npm audit", audit_level="high"))
    ['npm', 'audit', '--audit-level=high']
    """

    name = "npm"

    #: default per-process time limit (seconds)
    DEFAULT_TIMEOUT_S: int = 300

    def __init__(
        self,
        npm_bin: str = "npm",
        timeout_s: Optional[int] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> None:
        self.npm_bin = npm_bin
        self.timeout_s = timeout_s or self.DEFAULT_TIMEOUT_S
        self.env = {
            **os.environ,
            "NPM_CONFIG_FUND": "false",
            "NPM_CONFIG_UPDATE_NOTIFIER": "false",
        }
        if env:
            self.env.update(env)

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "NpmTool":
        return cls(npm_bin=settings.npm_bin, timeout_s=settings.timeout_s)

    # ----- Public API -------------------------------------------------------------

    def version(self) -> str:
        """Return the output of ``npm --version``.

        Raises
        ------
        ToolExecutionError
            If npm cannot be started or exits with a non-zero code.
        """
        run = self._run([self.npm_bin, "--version"])
        if run.returncode != 0:
            raise ToolExecutionError(
                self.name,
                f"'npm --version' exited with code {run.returncode}",
                {"stderr": run.stderr.strip()},
            )
        return run.stdout.strip()

    def build_audit_cmd(self, resolved: ResolvedInput) -> List[str]:
        """Turn the resolved command string into an argv.

        The leading ``npm`` is replaced with the configured executable and
        ``--audit-level`` is appended so npm's exit code honours the level.
        """
        tokens = shlex.split(resolved.audit_command)
        if tokens and tokens[0] == "npm":
            tokens[0] = self.npm_bin
        return tokens + [f"--audit-level={resolved.audit_level}"]

    def audit(self, resolved: ResolvedInput, cwd: Union[str, Path, None] = None) -> ToolRunResult:
        """Run the audit in ``cwd``, or in the project root when omitted."""
        if cwd is None:
            try:
                cwd = find_project_root()
            except FileSystemError:
                logger.warning("No package.json found, running npm audit in %s", os.getcwd())
                cwd = os.getcwd()
        cmd = self.build_audit_cmd(resolved)
        logger.info("Running: %s", " ".join(cmd))
        run = self._run(cmd, cwd=str(cwd))
        logger.debug("Return code: %s (%.2fs)", run.returncode, run.duration_s)
        return run

    # ----- Utilities --------------------------------------------------------------

    def _run(self, cmd: Sequence[str], cwd: Optional[str] = None) -> ToolRunResult:
        started = time.time()
        try:
            proc = subprocess.run(
                cmd,
                cwd=cwd,
                env=self.env,
                check=False,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                timeout=self.timeout_s,
            )
        except FileNotFoundError as e:
            raise ToolExecutionError(self.name, f"executable not found: {cmd[0]}") from e
        except subprocess.TimeoutExpired as e:
            # Synthesize a result on timeout
            duration = time.time() - started
            stdout = e.stdout
            if isinstance(stdout, bytes):
                stdout = stdout.decode("utf-8", "ignore")
            stderr = e.stderr
            if isinstance(stderr, bytes):
                stderr = stderr.decode("utf-8", "ignore")
            return ToolRunResult(
                tool=self.name,
                cmd=list(cmd),
                cwd=os.path.abspath(cwd or os.getcwd()),
                returncode=124,
                duration_s=duration,
                stdout=stdout or "",
                stderr=(stderr or "") + f"\n[TIMEOUT after {self.timeout_s}s]",
            )

        return ToolRunResult(
            tool=self.name,
            cmd=list(cmd),
            cwd=os.path.abspath(cwd or os.getcwd()),
            returncode=proc.returncode,
            duration_s=time.time() - started,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )


def get_npm_version(tool: Optional[NpmTool] = None) -> str:
    return (tool or NpmTool()).version()
