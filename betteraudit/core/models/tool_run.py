from __future__ import annotations

"""Common data model for external command results.

Classes
-------
ToolRunResult : Standardized command execution result

Examples
--------
>>> result = ToolRunResult(
...     tool="npm",
...     cmd=["npm", "audit"],
...     cwd="/project",
...     returncode=0,
...     duration_s=1.2,
...     stdout="found 0 vulnerabilities",
...     stderr="",
... )

See Also
--------
betteraudit.infra.tools.npm : npm execution
"""

from typing import List

from pydantic import BaseModel


class ToolRunResult(BaseModel):
    tool: str
    cmd: List[str]
    cwd: str
    returncode: int
    duration_s: float
    stdout: str
    stderr: str

    @property
    def timed_out(self) -> bool:
        return self.returncode == 124
