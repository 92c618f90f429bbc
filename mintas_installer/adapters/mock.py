"""
Mock adapters — test doubles for the injected capabilities.

``MockElevation`` records every command and either refuses it or runs
it without privileges.  ``InMemoryEnvironmentStore`` keeps the user
PATH in a string and can be told to fail reads or writes.
"""

from __future__ import annotations

from typing import Any

from mintas_installer.adapters.base import ElevationProvider, UserEnvironmentStore
from mintas_installer.core.errors import ElevationDenied, PathRegistrationWarning
from mintas_installer.core.services.install.execution.subprocess_runner import run_command


class MockElevation(ElevationProvider):
    """Elevation double.

    By default commands are executed as the current user, so file moves
    into a temp "system" directory really happen.
    """

    def __init__(self, deny: bool = False, execute: bool = True, available: bool = True) -> None:
        self._deny = deny
        self._execute = execute
        self._available = available
        self._call_log: list[list[str]] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_log(self) -> list[list[str]]:
        """Every command this mock has been asked to elevate."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def is_available(self) -> bool:
        return self._available

    def run(self, cmd: list[str]) -> dict[str, Any]:
        self._call_log.append(list(cmd))
        if self._deny:
            raise ElevationDenied(f"[mock] elevation declined for {' '.join(cmd)}")
        if self._execute:
            return run_command(cmd)
        return {"ok": True, "stdout": "", "elapsed_ms": 0}

    def reset(self) -> None:
        self._call_log.clear()


class InMemoryEnvironmentStore(UserEnvironmentStore):
    """User PATH held in memory."""

    def __init__(self, value: str = "", fail_reads: bool = False, fail_writes: bool = False) -> None:
        self.value = value
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.writes: list[str] = []

    @property
    def name(self) -> str:
        return "memory"

    def is_available(self) -> bool:
        return True

    def get_user_path(self) -> str:
        if self.fail_reads:
            raise PathRegistrationWarning("[mock] cannot read user PATH")
        return self.value

    def set_user_path(self, value: str) -> None:
        if self.fail_writes:
            raise PathRegistrationWarning("[mock] cannot write user PATH")
        self.writes.append(value)
        self.value = value
