"""
Execution — user PATH registration.

Only windows needs it: the application directory is appended to the
persistent user ``Path``.  On linux and macOS ``/usr/local/bin`` is
already searched, so the registrar there does nothing.

Both directions are best effort.  A failure raises
``PathRegistrationWarning``, which the orchestrator reports without
failing the run.
"""

from __future__ import annotations

import logging
import shutil
from abc import ABC, abstractmethod
from typing import Callable

from mintas_installer.adapters.base import UserEnvironmentStore
from mintas_installer.core.models.platform import InstallLocation, Platform
from mintas_installer.core.services.install.detection.platform import is_posix_emulation
from mintas_installer.core.services.install.execution.subprocess_runner import run_command

logger = logging.getLogger(__name__)

WINDOWS_PATH_SEPARATOR = ";"


def native_windows_path(path: str) -> str:
    """Convert an MSYS/Cygwin path to its windows form with ``cygpath -w``.

    Native windows paths are returned unchanged, as is anything
    ``cygpath`` cannot convert.
    """
    if not is_posix_emulation() or shutil.which("cygpath") is None:
        return path
    result = run_command(["cygpath", "-w", path], timeout=10)
    if not result["ok"]:
        logger.debug("cygpath could not convert %s: %s", path, result.get("error"))
        return path
    return result["stdout"].strip() or path


class PathRegistrar(ABC):
    """Adds the install location to, and drops it from, the user PATH."""

    @abstractmethod
    def add_to_path(self, location: InstallLocation) -> bool:
        """Append the location if absent.  Returns True if PATH changed."""

    @abstractmethod
    def remove_from_path(self, location: InstallLocation) -> bool:
        """Drop every matching segment.  Returns True if PATH changed."""


class NoopPathRegistrar(PathRegistrar):
    """linux/macOS: the canonical directory is on the default PATH."""

    def __init__(self, platform: Platform) -> None:
        self.platform = platform

    def add_to_path(self, location: InstallLocation) -> bool:
        logger.debug("No PATH registration on %s", self.platform)
        return False

    def remove_from_path(self, location: InstallLocation) -> bool:
        return False


class WindowsPathRegistrar(PathRegistrar):
    """Edit the registry-backed user ``Path`` through an environment store."""

    def __init__(
        self,
        store: UserEnvironmentStore,
        path_converter: Callable[[str], str] = native_windows_path,
    ) -> None:
        self.store = store
        self._convert = path_converter

    def entry_for(self, location: InstallLocation) -> str:
        return self._convert(location.path_entry or location.path)

    def add_to_path(self, location: InstallLocation) -> bool:
        entry = self.entry_for(location)
        current = self.store.get_user_path()
        if entry in _split(current):
            logger.debug("%s already on user PATH", entry)
            return False

        if not current or current.endswith(WINDOWS_PATH_SEPARATOR):
            updated = current + entry
        else:
            updated = current + WINDOWS_PATH_SEPARATOR + entry
        self.store.set_user_path(updated)
        logger.info("Added %s to user PATH", entry)
        return True

    def remove_from_path(self, location: InstallLocation) -> bool:
        entry = self.entry_for(location)
        segments = _split(self.store.get_user_path())
        kept = [s for s in segments if s != entry]
        if len(kept) == len(segments):
            logger.debug("%s not on user PATH", entry)
            return False

        self.store.set_user_path(WINDOWS_PATH_SEPARATOR.join(kept))
        logger.info("Removed %s from user PATH", entry)
        return True


def _split(value: str) -> list[str]:
    return value.split(WINDOWS_PATH_SEPARATOR) if value else []
