"""
Adapter base — the capability contracts the pipeline depends on.

Two capabilities leave the process:

- ``ElevationProvider``: given a command, run it with elevated rights
  or fail with ``ElevationDenied``.
- ``UserEnvironmentStore``: read and rewrite the persistent per-user
  PATH variable.  Failures surface as ``PathRegistrationWarning``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ElevationProvider(ABC):
    """Runs single commands with elevated privileges."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier (e.g. 'sudo', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the escalation mechanism exists on this host.

        Should be fast and never raise.
        """

    @abstractmethod
    def run(self, cmd: list[str]) -> dict[str, Any]:
        """Run ``cmd`` elevated.

        Returns the runner's result dict (``{"ok": ..., ...}``) when the
        command itself ran, successfully or not.

        Raises:
            ElevationDenied: If elevation was refused or is impossible.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class UserEnvironmentStore(ABC):
    """The persistent, user-scoped PATH variable."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Store identifier (e.g. 'powershell', 'memory')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the store can be reached on this host."""

    @abstractmethod
    def get_user_path(self) -> str:
        """Current value of the user PATH ('' when unset).

        Raises:
            PathRegistrationWarning: If the value cannot be read.
        """

    @abstractmethod
    def set_user_path(self, value: str) -> None:
        """Replace the user PATH with ``value``.

        Raises:
            PathRegistrationWarning: If the value cannot be written.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
