"""
Elevation providers — how privileged file operations get run.

``SudoElevation`` is the linux/macos provider.  The sudo password prompt
is interactive and talks to the terminal directly; nothing here ever
sees or stores it.
"""

from __future__ import annotations

import logging
import os
import shutil
from typing import Any

from mintas_installer.adapters.base import ElevationProvider
from mintas_installer.core.errors import ElevationDenied
from mintas_installer.core.services.install.execution.subprocess_runner import run_command

logger = logging.getLogger(__name__)

# sudo's own refusal messages, as opposed to the wrapped command failing
_DENIAL_MARKERS = (
    "incorrect password",
    "sorry, try again",
    "is not in the sudoers",
    "a password is required",
    "not allowed to execute",
)


class SudoElevation(ElevationProvider):
    """Run commands through ``sudo``, or directly when already root."""

    def __init__(self, sudo: str = "sudo") -> None:
        self._sudo = sudo

    @property
    def name(self) -> str:
        return "sudo"

    def is_available(self) -> bool:
        return _is_root() or shutil.which(self._sudo) is not None

    def run(self, cmd: list[str]) -> dict[str, Any]:
        if _is_root():
            logger.debug("Already root, running without %s: %s", self._sudo, cmd)
            return run_command(cmd)

        if shutil.which(self._sudo) is None:
            raise ElevationDenied(
                f"'{self._sudo}' is not available; cannot run {' '.join(cmd)} with elevated rights"
            )

        logger.info("Requesting elevated rights for: %s", " ".join(cmd))
        result = run_command([self._sudo, *cmd], interactive=True)
        if result["ok"]:
            return result

        stderr = result.get("stderr", "").lower()
        if any(marker in stderr for marker in _DENIAL_MARKERS):
            raise ElevationDenied(f"Privilege escalation was declined: {result.get('stderr', '').strip()}")
        return result


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0
