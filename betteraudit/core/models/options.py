"""Input and output models of the input resolution pipeline.

Classes
-------
CommandOptions : Flat options structure produced by the CLI
ResolvedInput : Fully resolved execution context handed to the continuation

Examples
--------
>>> options = CommandOptions.model_validate({"configFile": ".nsprc", "exclude": "1567"})
>>> options.config_file
'.nsprc'
"""
from __future__ import annotations

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

AuditLevel = Literal["info", "low", "moderate", "high", "critical"]
AUDIT_LEVELS: Tuple[str, ...] = ("info", "low", "moderate", "high", "critical")


class CommandOptions(BaseModel):
    """User flags. Every field is optional.

    Accepts the camelCase names used by the npm ecosystem (``configFile``,
    ``moduleIgnore``, ``includeColumns``) as well as the snake_case names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    production: bool = False
    registry: Optional[str] = None
    level: Optional[str] = None
    config_file: Optional[str] = Field(default=None, alias="configFile")
    exclude: Optional[str] = None
    module_ignore: Optional[str] = Field(default=None, alias="moduleIgnore")
    include_columns: Optional[str] = Field(default=None, alias="includeColumns")


class ResolvedInput(BaseModel):
    """Everything needed to run the audit and render its results."""

    model_config = ConfigDict(frozen=True)

    audit_command: str
    audit_level: str
    exception_ids: List[str] = Field(default_factory=list)
    ignored_modules: List[str] = Field(default_factory=list)
    included_columns: List[str] = Field(default_factory=list)

    def as_args(self) -> Tuple[str, str, List[str], List[str], List[str]]:
        """Return the values in continuation order."""
        return (
            self.audit_command,
            self.audit_level,
            list(self.exception_ids),
            list(self.ignored_modules),
            list(self.included_columns),
        )
