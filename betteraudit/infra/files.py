"""File utilities.

Functions
---------
safe_json_loads : Best-effort JSON loader that never raises
read_file : Read a JSON object from disk, or False
find_project_root : Locate the nearest directory holding package.json

Examples
--------
>>> from betteraudit.infra.files import safe_json_loads
>>> safe_json_loads('{"1337": {"active": true}}')
{'1337': {'active': True}}
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

from betteraudit.core.exceptions import FileSystemError
from betteraudit.core.logging_config import get_logger

logger = get_logger(__name__)

PROJECT_MARKER = "package.json"


def safe_json_loads(payload: str | bytes | None, default: Any = None) -> Any:
    """Best-effort JSON loader that never raises."""
    if payload is None:
        return default
    try:
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8", "ignore")
        return json.loads(payload)
    except ValueError:
        return default


def read_file(path: Union[str, Path]) -> Union[Dict[str, Any], Literal[False]]:
    """Read a UTF-8 JSON object from ``path``.

    Parameters
    ----------
    path : str or Path
        File to read.

    Returns
    -------
    dict or False
        The decoded object, or False when the file is missing, unreadable,
        not valid JSON, or holds something other than a JSON object.

    Notes
    -----
    Never raises: an absent exceptions file is a normal situation.
    """
    try:
        data = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Could not read %s: %s", path, exc)
        return False

    parsed = safe_json_loads(data, default=None)
    if not isinstance(parsed, dict):
        logger.debug("%s does not contain a JSON object, ignoring it", path)
        return False
    return parsed


def find_project_root(current_dir: Optional[Union[str, Path]] = None) -> Path:
    """Find the nearest ancestor directory containing ``package.json``.

    Parameters
    ----------
    current_dir : str or Path, optional
        Starting directory, defaults to the current working directory.

    Returns
    -------
    Path
        Absolute path of the project root.

    Raises
    ------
    FileSystemError
        If no ``package.json`` exists up to the filesystem root.
    """
    start = Path(current_dir) if current_dir is not None else Path.cwd()
    current = start.resolve()
    while not (current / PROJECT_MARKER).exists():
        parent = current.parent
        if parent == current:
            raise FileSystemError(str(start), "Project root not found")
        current = parent
    return current
