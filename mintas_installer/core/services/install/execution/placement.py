"""
Execution — placing the payload in its canonical location.

Windows gets a per-user application directory that mirrors the
unpacked tree; linux and macOS get a single executable in a shared bin
directory.  The location on disk is the only record of an install:
``remove`` looks at it and nothing else.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from mintas_installer.adapters.base import ElevationProvider
from mintas_installer.core.config.loader import InstallerSettings
from mintas_installer.core.errors import ElevationDenied, PlacementError
from mintas_installer.core.models.platform import InstallLocation, Platform

logger = logging.getLogger(__name__)

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


class Placer(ABC):
    """Moves a payload into place and takes it away again."""

    platform: Platform

    @abstractmethod
    def location(self) -> InstallLocation:
        """Where this platform's install lives, whether or not it exists."""

    @abstractmethod
    def place(self, payload: Path) -> InstallLocation:
        """Install ``payload``, overwriting whatever is there.

        Raises:
            PlacementError: If the payload cannot be put in place.
        """

    @abstractmethod
    def remove(self) -> bool:
        """Delete the install.

        Returns:
            True if something was removed, False if nothing was installed.

        Raises:
            PlacementError: If the install exists but cannot be removed.
        """


class WindowsPlacer(Placer):
    """Copy the unpacked tree into ``%LOCALAPPDATA%\\Mintas``."""

    platform = Platform.WINDOWS

    def __init__(self, settings: InstallerSettings, environ: dict[str, str] | None = None) -> None:
        self.settings = settings
        self._environ = environ

    def app_dir(self) -> Path:
        app_dir = self.settings.windows_app_dir(self._environ)
        if app_dir is None:
            raise PlacementError(
                "LOCALAPPDATA is not set; cannot determine the install directory"
            )
        return app_dir

    def location(self) -> InstallLocation:
        app_dir = self.app_dir()
        return InstallLocation(
            platform=self.platform,
            path=str(app_dir),
            is_directory=True,
            path_entry=str(app_dir),
        )

    def place(self, payload: Path) -> InstallLocation:
        if not payload.is_dir():
            raise PlacementError(f"Expected an unpacked directory at {payload}")

        target = self.app_dir()
        # Stage next to the target so the final swap is a same-volume rename
        staged = target.with_name(f"{target.name}.new-{uuid.uuid4().hex[:8]}")
        logger.info("Copying %s -> %s", payload, target)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copytree(payload, staged)
            if target.exists():
                shutil.rmtree(target)
            staged.rename(target)
        except OSError as e:
            shutil.rmtree(staged, ignore_errors=True)
            raise PlacementError(f"Cannot install into {target}: {e}") from e

        return self.location()

    def remove(self) -> bool:
        target = self.app_dir()
        if not target.exists():
            logger.debug("Nothing to remove at %s", target)
            return False
        logger.info("Removing %s", target)
        try:
            if target.is_dir():
                shutil.rmtree(target)
            else:
                target.unlink()
        except OSError as e:
            raise PlacementError(f"Cannot remove {target}: {e}") from e
        return True


class UnixPlacer(Placer):
    """Move the single binary into ``/usr/local/bin`` (elevating if needed)."""

    def __init__(
        self,
        settings: InstallerSettings,
        platform: Platform,
        elevation: ElevationProvider,
    ) -> None:
        self.settings = settings
        self.platform = platform
        self.elevation = elevation

    def location(self) -> InstallLocation:
        return InstallLocation(
            platform=self.platform,
            path=str(self.settings.unix_binary_path()),
            is_directory=False,
        )

    def place(self, payload: Path) -> InstallLocation:
        if not payload.is_file():
            raise PlacementError(f"Expected an executable at {payload}")

        install_dir = Path(self.settings.unix_install_dir)
        target = self.settings.unix_binary_path()

        if install_dir.is_dir() and self._writable(install_dir):
            logger.info("Installing %s -> %s", payload, target)
            self._place_direct(payload, target)
        else:
            logger.info("Need elevated rights to install to %s", install_dir)
            if not install_dir.is_dir():
                self._elevated(["mkdir", "-p", str(install_dir)], f"create {install_dir}")
            self._elevated(["mv", str(payload), str(target)], f"move binary to {target}")
            self._elevated(["chmod", "+x", str(target)], f"mark {target} executable")

        return self.location()

    def remove(self) -> bool:
        target = self.settings.unix_binary_path()
        if not (target.exists() or target.is_symlink()):
            logger.debug("Nothing to remove at %s", target)
            return False

        logger.info("Removing %s", target)
        if self._writable(target.parent):
            try:
                target.unlink()
            except OSError as e:
                raise PlacementError(f"Cannot remove {target}: {e}") from e
        else:
            self._elevated(["rm", "-f", str(target)], f"remove {target}")
        return True

    def _place_direct(self, payload: Path, target: Path) -> None:
        # Land under a temporary name, then swap in with a single rename
        staged = target.with_name(f".{target.name}.new-{uuid.uuid4().hex[:8]}")
        try:
            shutil.move(str(payload), str(staged))
            staged.chmod(staged.stat().st_mode | _EXEC_BITS)
            os.replace(staged, target)
        except OSError as e:
            staged.unlink(missing_ok=True)
            raise PlacementError(f"Cannot install {target}: {e}") from e

    def _elevated(self, cmd: list[str], what: str) -> dict[str, Any]:
        try:
            result = self.elevation.run(cmd)
        except ElevationDenied as e:
            raise PlacementError(f"Could not {what}: {e}", elevation_declined=True) from e
        if not result.get("ok"):
            detail = result.get("stderr", "").strip() or result.get("error", "unknown error")
            raise PlacementError(f"Could not {what}: {detail}")
        return result

    def _writable(self, path: Path) -> bool:
        return os.access(path, os.W_OK)
