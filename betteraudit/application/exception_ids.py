"""Resolution of the finding identifiers to suppress.

Combines the identifiers given on the command line with the currently
active entries of the exceptions configuration.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from pydantic import ValidationError

from betteraudit.core.logging_config import get_logger
from betteraudit.core.models import ExceptionEntry, NsprcResult

logger = get_logger(__name__)


def clean_ids(values: Iterable[str]) -> List[str]:
    """Trim each value and drop empty ones, keeping order."""
    return [value.strip() for value in values if value and value.strip()]


def active_config_ids(nsprc: NsprcResult, now: Optional[datetime] = None) -> List[str]:
    """Return the keys of ``nsprc`` whose entries are currently active.

    An entry is active unless it carries a falsy ``active`` or its
    ``expiry`` lies before ``now``. Entries whose expiry cannot be parsed, or whose record
    fails validation, are skipped with a warning.
    """
    if not nsprc or not isinstance(nsprc, dict):
        return []

    now = now or datetime.now(timezone.utc)
    ids: List[str] = []
    for key, value in nsprc.items():
        try:
            entry = ExceptionEntry.from_value(value)
        except ValidationError as exc:
            logger.warning("Ignoring malformed exception %s: %s", key, exc.errors()[0]["msg"])
            continue

        if not entry.enabled:
            logger.debug("Exception %s is inactive", key)
            continue
        status = entry.expiry_status(now)
        if not status.valid:
            logger.warning("Ignoring exception %s: invalid expiry %r", key, entry.expiry)
            continue
        if status.expired:
            logger.info("Exception %s expired on %s", key, entry.expiry)
            continue
        ids.append(str(key))
    return ids


def get_exception_ids(
    nsprc: NsprcResult,
    cmd_exceptions: Optional[Iterable[str]] = None,
    now: Optional[datetime] = None,
) -> List[str]:
    """
    Merge command-line and configured exceptions into one ordered list.

    Parameters
    ----------
    nsprc : dict or False
        Loaded exceptions configuration, False when there is none.
    cmd_exceptions : Iterable[str], optional
        Identifiers given with ``--exclude``.
    now : datetime, optional
        Reference time for expiry checks.

    Returns
    -------
    List[str]
        Command-line identifiers first, then active configured ones, without
        duplicates.

    Examples
    --------
    >>> get_exception_ids(False, ["1567", " 1902 "])
    ['1567', '1902']
    >>> get_exception_ids({"975": {"active": False}, "976": "note"}, ["1567"])
    ['1567', '976']
    """
    cmd_ids = clean_ids(cmd_exceptions or [])
    if cmd_ids:
        logger.info("Exception IDs: %s", ", ".join(cmd_ids))

    # dict preserves insertion order, so this de-duplicates keeping first seen
    merged = dict.fromkeys(cmd_ids)
    merged.update(dict.fromkeys(active_config_ids(nsprc, now)))
    return list(merged)
