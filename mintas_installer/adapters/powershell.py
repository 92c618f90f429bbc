"""
PowerShell environment store — the windows user PATH.

Reads and writes the ``Path`` variable at ``User`` scope through
``[Environment]::Get/SetEnvironmentVariable``, which persists it in the
registry and broadcasts the change to new processes.
"""

from __future__ import annotations

import logging
import shutil

from mintas_installer.adapters.base import UserEnvironmentStore
from mintas_installer.core.errors import PathRegistrationWarning
from mintas_installer.core.services.install.execution.subprocess_runner import run_command

logger = logging.getLogger(__name__)


def _ps_quote(value: str) -> str:
    """Single-quoted PowerShell literal."""
    return "'" + value.replace("'", "''") + "'"


class PowerShellEnvironmentStore(UserEnvironmentStore):
    """User-scope PATH via ``powershell.exe``."""

    def __init__(self, executable: str = "powershell.exe", timeout: float = 60) -> None:
        self._executable = executable
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "powershell"

    def is_available(self) -> bool:
        return shutil.which(self._executable) is not None

    def get_user_path(self) -> str:
        result = self._invoke("[Environment]::GetEnvironmentVariable('Path', 'User')")
        return result.get("stdout", "").rstrip("\r\n")

    def set_user_path(self, value: str) -> None:
        self._invoke(f"[Environment]::SetEnvironmentVariable('Path', {_ps_quote(value)}, 'User')")
        logger.debug("User PATH rewritten (%d chars)", len(value))

    def _invoke(self, script: str) -> dict:
        result = run_command(
            [self._executable, "-NoProfile", "-NonInteractive", "-Command", script],
            timeout=self._timeout,
        )
        if not result["ok"]:
            detail = result.get("stderr", "").strip() or result.get("error", "")
            raise PathRegistrationWarning(f"PowerShell call failed: {detail}")
        return result
