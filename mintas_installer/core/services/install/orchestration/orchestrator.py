"""
Orchestration — the install/uninstall state machine.

Install:    idle → detecting → resolving → downloading → extracting
                 → placing → registering → cleaning_up → done
Uninstall:  idle → detecting → placing → registering → cleaning_up → done

Any fatal ``InstallError`` jumps to ``cleaning_up`` and then ``failed``.
The temporary workspace is removed on every exit path.  Errors never
escape ``install()``/``uninstall()``: they end up on the ``RunReport``.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Callable

from mintas_installer.core.config.loader import InstallerSettings
from mintas_installer.core.errors import (
    DownloadError,
    InstallError,
    PathRegistrationWarning,
    PlacementError,
)
from mintas_installer.core.models.platform import Platform
from mintas_installer.core.models.run import RunReport, Stage
from mintas_installer.core.services.install.backends import (
    BackendFactory,
    PlatformBackend,
    build_backend,
)
from mintas_installer.core.services.install.detection.platform import detect
from mintas_installer.core.services.install.execution.archive import Unpacker
from mintas_installer.core.services.install.execution.download import Fetcher
from mintas_installer.core.services.install.resolver.release import ReleaseResolver

logger = logging.getLogger(__name__)

# (level, message) where level is "info", "warn" or "error"
StatusCallback = Callable[[str, str], None]

WORKSPACE_PREFIX = "mintas-install-"


class TemporaryWorkspace:
    """One run's scratch directory: the download and the unpack staging area."""

    def __init__(self, root: Path | None = None, prefix: str = WORKSPACE_PREFIX) -> None:
        self._root = root
        self._prefix = prefix
        self.path: Path | None = None

    def create(self) -> Path:
        try:
            self.path = Path(tempfile.mkdtemp(prefix=self._prefix, dir=self._root))
        except OSError as e:
            raise DownloadError(f"Cannot create temporary workspace: {e}") from e
        logger.debug("Workspace: %s", self.path)
        return self.path

    def cleanup(self) -> bool:
        """Remove the workspace.  Returns False if it could not be removed."""
        if self.path is None:
            return True
        shutil.rmtree(self.path, ignore_errors=True)
        if self.path.exists():
            logger.warning("Could not remove workspace %s", self.path)
            return False
        logger.debug("Removed workspace %s", self.path)
        self.path = None
        return True


class Orchestrator:
    """Sequences detection, resolution, download, unpack, placement and PATH."""

    def __init__(
        self,
        settings: InstallerSettings | None = None,
        *,
        kernel_name: str | None = None,
        resolver: ReleaseResolver | None = None,
        fetcher: Fetcher | None = None,
        unpacker: Unpacker | None = None,
        backend_factory: BackendFactory | None = None,
        workspace_root: Path | None = None,
        on_status: StatusCallback | None = None,
    ) -> None:
        self.settings = settings or InstallerSettings()
        self._kernel_name = kernel_name
        self.resolver = resolver or ReleaseResolver(self.settings)
        self.fetcher = fetcher or Fetcher(
            timeout=self.settings.timeout,
            user_agent=self.settings.user_agent,
        )
        self.unpacker = unpacker or Unpacker(self.settings.binary_name)
        self._backend_factory = backend_factory or build_backend
        self._workspace_root = workspace_root
        self._on_status = on_status

    # ── Workflows ───────────────────────────────────────────────

    def install(self) -> RunReport:
        report = RunReport(operation="install")
        workspace = TemporaryWorkspace(self._workspace_root)
        try:
            platform = self._detect(report)
            backend = self._backend_factory(platform, self.settings)

            report.enter(Stage.RESOLVING)
            self._status("info", "Fetching latest release from GitHub...")
            asset = self.resolver.resolve(platform)
            report.asset = asset
            self._status("info", f"Found: {asset.download_url}")

            report.enter(Stage.DOWNLOADING)
            work_dir = workspace.create()
            archive = work_dir / asset.filename
            self._status("info", f"Downloading {asset.filename}...")
            self.fetcher.download(asset.download_url, archive)

            report.enter(Stage.EXTRACTING)
            self._status("info", "Extracting...")
            payload = self.unpacker.extract(archive, platform, work_dir / "staging")

            report.enter(Stage.PLACING)
            target = backend.placer.location()
            self._status("info", f"Installing to {target.path}...")
            location = backend.placer.place(payload)
            report.location = location
            report.changed = True
            self._status("info", f"Mintas installed to: {location.path}")

            report.enter(Stage.REGISTERING)
            self._register(backend, report)
        except InstallError as exc:
            self._fail(report, exc)
        finally:
            self._cleanup(report, workspace)
        return self._finish(report)

    def uninstall(self) -> RunReport:
        report = RunReport(operation="uninstall")
        try:
            platform = self._detect(report)
            backend = self._backend_factory(platform, self.settings)

            report.enter(Stage.PLACING)
            self._remove(backend, report)

            report.enter(Stage.REGISTERING)
            self._unregister(backend, report)
        except InstallError as exc:
            self._fail(report, exc)
        finally:
            self._cleanup(report, None)
        return self._finish(report)

    # ── Stages ──────────────────────────────────────────────────

    def _detect(self, report: RunReport) -> Platform:
        report.enter(Stage.DETECTING)
        platform = detect(self._kernel_name)
        report.platform = platform
        self._status("info", f"Detected OS: {platform}")
        return platform

    def _remove(self, backend: PlatformBackend, report: RunReport) -> None:
        try:
            location = backend.placer.location()
        except PlacementError as exc:
            # No install root means nothing can have been installed there
            self._warn(report, f"Mintas not found: {exc.message}")
            return
        report.location = location
        if backend.placer.remove():
            report.changed = True
            self._status("info", f"Removed {location.path}")
        else:
            self._warn(report, f"Mintas not found at {location.path}")

    def _register(self, backend: PlatformBackend, report: RunReport) -> None:
        location = report.location
        if location is None or location.path_entry is None:
            return
        self._status("info", "Adding to PATH...")
        try:
            backend.registrar.add_to_path(location)
        except PathRegistrationWarning as exc:
            self._warn(
                report,
                f"PATH update may have failed ({exc.message}). "
                f"Please add {location.path_entry} to your PATH manually.",
            )

    def _unregister(self, backend: PlatformBackend, report: RunReport) -> None:
        location = report.location
        if location is None or location.path_entry is None:
            return
        try:
            if backend.registrar.remove_from_path(location):
                self._status("info", f"Removed {location.path_entry} from PATH")
        except PathRegistrationWarning as exc:
            self._warn(report, f"PATH cleanup may have failed ({exc.message}).")

    def _cleanup(self, report: RunReport, workspace: TemporaryWorkspace | None) -> None:
        report.enter(Stage.CLEANING_UP)
        if workspace is not None and not workspace.cleanup():
            self._warn(report, f"Temporary files left at {workspace.path}")

    # ── Bookkeeping ─────────────────────────────────────────────

    def _fail(self, report: RunReport, exc: InstallError) -> None:
        report.failed_stage = report.stage
        report.error = exc.message
        report.error_kind = exc.kind
        logger.debug("%s failed in %s: %s", report.operation, report.stage, exc.kind)
        self._status("error", exc.message)

    def _finish(self, report: RunReport) -> RunReport:
        report.enter(Stage.FAILED if report.error else Stage.DONE)
        logger.info("%s finished: %s", report.operation, report.status)
        return report

    def _warn(self, report: RunReport, message: str) -> None:
        report.warnings.append(message)
        self._status("warn", message)

    def _status(self, level: str, message: str) -> None:
        logger.info("[%s] %s", level, message)
        if self._on_status is not None:
            self._on_status(level, message)
