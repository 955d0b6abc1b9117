"""Models for the exceptions configuration (``.nsprc``).

An exceptions file maps finding identifiers to either a structured entry
or a bare informational string::

    {
      "1337": {"active": true, "notes": "Ignored since we don't use xxx"},
      "GHSA-xxxx-yyyy": {"expiry": "2099-01-31", "notes": "Waiting on upstream"},
      "4501": "Not reachable from production code"
    }

Classes
-------
ExceptionEntry : One configuration record
ExpiryStatus : Result of evaluating an ``expiry`` value
ConfigSourceKind : Which loader handles a configuration path
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict

ExceptionConfig = Dict[str, Any]
NsprcResult = Union[ExceptionConfig, Literal[False]]

# Accepted besides ISO-8601, e.g. "1 March 2099" or "March 1, 2099".
_DATE_FORMATS = (
    "%d %B %Y",
    "%d %b %Y",
    "%B %d %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%b %d, %Y",
    "%Y/%m/%d",
)

# Values of an explicit ``active`` key that disable an entry.
_FALSY_ACTIVE = (False, None, 0, "")


class ConfigSourceKind(str, Enum):
    NSPRC_FILE = "nsprc_file"
    CONFIG_MODULE = "config_module"


@dataclass(frozen=True)
class ExpiryStatus:
    valid: bool
    expired: bool = False


def parse_expiry(expiry: Union[int, float, str, None]) -> Optional[datetime]:
    """
    Convert an ``expiry`` value to an aware UTC datetime.

    Numbers are epoch milliseconds. Strings are ISO-8601 dates or datetimes,
    or one of the human formats in ``_DATE_FORMATS``; naive values are UTC.
    Returns None when the value cannot be interpreted.
    """
    if isinstance(expiry, bool) or expiry is None:
        return None
    if isinstance(expiry, (int, float)):
        try:
            return datetime.fromtimestamp(expiry / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    text = str(expiry).strip()
    if not text:
        return None
    parsed: Optional[datetime] = None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        for fmt in _DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def analyze_expiry(
    expiry: Union[int, float, str, None],
    now: Optional[datetime] = None,
) -> ExpiryStatus:
    """
    Evaluate an ``expiry`` value against ``now``.

    Parameters
    ----------
    expiry : int, float, str or None
        Epoch milliseconds or a date string. Empty values mean "never expires".
    now : datetime, optional
        Reference time, defaults to the current UTC time.

    Returns
    -------
    ExpiryStatus
        ``valid`` is False for values that cannot be parsed. ``expired`` is
        True only when the expiry lies strictly before ``now``.

    Examples
    --------
    >>> analyze_expiry(None)
    ExpiryStatus(valid=True, expired=False)
    >>> analyze_expiry("not a date").valid
    False
    """
    if expiry is None or expiry == "" or expiry == 0:
        return ExpiryStatus(valid=True)

    expiry_date = parse_expiry(expiry)
    if expiry_date is None:
        return ExpiryStatus(valid=False)

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return ExpiryStatus(valid=True, expired=expiry_date < now)


class ExceptionEntry(BaseModel):
    """One record of the exceptions file.

    ``notes`` is informational only and never affects filtering. Unknown
    keys are kept so the original record round-trips.

    A missing ``active`` key means active; a present one counts only when
    truthy, so ``"active": null`` disables the entry.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    active: Any = True
    expiry: Optional[Union[int, float, str]] = None
    notes: Any = None

    @classmethod
    def from_value(cls, value: Any) -> "ExceptionEntry":
        """Build an entry from a raw config value.

        Mappings are validated as records. Anything else (usually a bare
        string) has no activation structure and is always active.
        """
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        return cls(notes=value)

    def expiry_status(self, now: Optional[datetime] = None) -> ExpiryStatus:
        return analyze_expiry(self.expiry, now)

    @property
    def enabled(self) -> bool:
        return self.active not in _FALSY_ACTIVE

    def is_active(self, now: Optional[datetime] = None) -> bool:
        if not self.enabled:
            return False
        status = self.expiry_status(now)
        return status.valid and not status.expired
