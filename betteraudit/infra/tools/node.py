"""Out-of-process loader for JavaScript/TypeScript config modules.

A config module is a ``.js`` or ``.ts`` file that exposes a zero-argument
``requestNsprcFile`` function (as a named export or on the default export)
returning an exceptions mapping or ``false``, directly or via a Promise::

    // audit.config.js
    module.exports = {
      async requestNsprcFile() {
        const res = await fetch("https://example.com/nsprc.json");
        return res.json();
      },
    };

Security boundary
-----------------
Loading a config module executes arbitrary user code with the user's
privileges. It only happens for a path the user names explicitly, and the
code runs in a separate ``node`` process: nothing it does can reach this
interpreter. The only thing read back is a JSON document written to a
result file in a private temporary directory, so the module may print
freely to stdout and stderr.
"""
from __future__ import annotations

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from betteraudit.config import AppSettings
from betteraudit.core.exceptions import ConfigLoadError
from betteraudit.core.logging_config import get_logger
from betteraudit.core.models import NsprcResult

logger = get_logger(__name__)

# Evaluated as an ES module; argv[1] is the absolute module path and argv[2]
# the file that receives the JSON result.
_LOADER_SCRIPT = """
const { pathToFileURL } = await import('node:url');
const { writeFileSync } = await import('node:fs');
const [modulePath, resultPath] = process.argv.slice(1);
const mod = await import(pathToFileURL(modulePath).href);
let request = mod.requestNsprcFile;
if (typeof request !== 'function') request = mod.default?.requestNsprcFile;
const result = typeof request === 'function' ? await request() : false;
writeFileSync(resultPath, JSON.stringify(result === undefined ? false : result) ?? 'false');
"""

_RESULT_FILE = "result.json"

# stderr markers of a node that cannot load TypeScript sources.
_TS_UNSUPPORTED_MARKERS = (
    "ERR_UNKNOWN_FILE_EXTENSION",
    "SyntaxError",
)


class NodeConfigModuleLoader:
    """Load a config module with node and return its exceptions mapping.

    Parameters
    ----------
    node_bin : str, optional
        node executable. Default is ``node``.
    timeout_s : int, optional
        Time limit for the whole load. Default is DEFAULT_TIMEOUT_S (60).
    env : Dict[str, str], optional
        Additional environment variables for the node process.

    Examples
    --------
    >>> loader = NodeConfigModuleLoader()
    >>> await loader.load(Path("audit.config.js"))  # doctest: +SKIP
    {'1337': {'active': True}}
    """

    DEFAULT_TIMEOUT_S: int = 60

    def __init__(
        self,
        node_bin: str = "node",
        timeout_s: Optional[int] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> None:
        self.node_bin = node_bin
        self.timeout_s = timeout_s or self.DEFAULT_TIMEOUT_S
        self.env = {
            **os.environ,
            "NODE_NO_WARNINGS": "1",
            "NPM_CONFIG_UPDATE_NOTIFIER": "false",
        }
        if env:
            self.env.update(env)

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "NodeConfigModuleLoader":
        return cls(node_bin=settings.node_bin, timeout_s=settings.timeout_s)

    def build_cmd(self, module_path: Union[str, Path], result_path: Union[str, Path]) -> List[str]:
        return [
            self.node_bin,
            "--input-type=module",
            "-e",
            _LOADER_SCRIPT,
            str(module_path),
            str(result_path),
        ]

    async def load(self, module_path: Union[str, Path]) -> NsprcResult:
        """Import ``module_path`` and return what ``requestNsprcFile`` yields.

        Returns
        -------
        dict or False
            False when the module has no ``requestNsprcFile`` or it returned
            something other than an object.

        Raises
        ------
        ConfigLoadError
            If the module is missing, node is unavailable, the module throws,
            the load times out, or no JSON result is written.
        """
        path = Path(module_path)
        if not path.is_file():
            raise ConfigLoadError(str(path), "file does not exist")

        logger.debug("Loading config module %s with %s", path, self.node_bin)
        with tempfile.TemporaryDirectory(prefix="betteraudit-") as tmpdir:
            result_path = Path(tmpdir) / _RESULT_FILE
            returncode, stdout, stderr = await self._exec(
                self.build_cmd(path, result_path), str(path)
            )
            output = result_path.read_text(encoding="utf-8") if result_path.is_file() else ""

        if stdout.strip():
            logger.debug("Output of %s: %s", path.name, stdout.strip())
        if returncode != 0:
            message = f"node exited with code {returncode}"
            if path.suffix == ".ts" and any(m in stderr for m in _TS_UNSUPPORTED_MARKERS):
                message += (
                    "; TypeScript config modules need a node version that strips"
                    " types (22.6 or newer)"
                )
            raise ConfigLoadError(
                str(path),
                message,
                {"returncode": returncode, "stderr": stderr.strip()},
            )

        try:
            result: Any = json.loads(output)
        except ValueError:
            raise ConfigLoadError(
                str(path),
                "requestNsprcFile did not produce JSON",
                {"output": output[:500]},
            )

        if result is False:
            return False
        if not isinstance(result, dict):
            logger.warning(
                "requestNsprcFile in %s returned %s instead of an object, ignoring it",
                path,
                type(result).__name__,
            )
            return False
        return result

    async def _exec(self, cmd: Sequence[str], module_path: str) -> Tuple[int, str, str]:
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self.env,
            )
        except OSError as exc:
            raise ConfigLoadError(module_path, f"cannot start {cmd[0]}: {exc}")

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout_s)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise ConfigLoadError(module_path, f"timed out after {self.timeout_s}s")

        return (
            proc.returncode,
            stdout.decode("utf-8", "ignore"),
            stderr.decode("utf-8", "ignore"),
        )
