"""
Platform backends — the Placer/PathRegistrar pair for each platform.

Selected once per run, right after detection.  The three install paths
differ only here; the orchestrator drives whichever pair it is given.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from mintas_installer.adapters.base import ElevationProvider, UserEnvironmentStore
from mintas_installer.adapters.elevation import SudoElevation
from mintas_installer.adapters.powershell import PowerShellEnvironmentStore
from mintas_installer.core.config.loader import InstallerSettings
from mintas_installer.core.errors import UnsupportedPlatform
from mintas_installer.core.models.platform import Platform
from mintas_installer.core.services.install.execution.path_registry import (
    NoopPathRegistrar,
    PathRegistrar,
    WindowsPathRegistrar,
    native_windows_path,
)
from mintas_installer.core.services.install.execution.placement import (
    Placer,
    UnixPlacer,
    WindowsPlacer,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlatformBackend:
    """Everything that varies by platform."""

    platform: Platform
    placer: Placer
    registrar: PathRegistrar


BackendFactory = Callable[[Platform, InstallerSettings], PlatformBackend]


def build_backend(
    platform: Platform,
    settings: InstallerSettings,
    *,
    elevation: ElevationProvider | None = None,
    env_store: UserEnvironmentStore | None = None,
    path_converter: Callable[[str], str] | None = None,
    environ: dict[str, str] | None = None,
) -> PlatformBackend:
    """Build the backend for ``platform``.

    Capabilities left as None get their real implementations: sudo on
    linux/macOS, PowerShell for the windows user PATH.
    """
    if platform is Platform.WINDOWS:
        backend = PlatformBackend(
            platform=platform,
            placer=WindowsPlacer(settings, environ=environ),
            registrar=WindowsPathRegistrar(
                env_store or PowerShellEnvironmentStore(),
                path_converter=path_converter or native_windows_path,
            ),
        )
    elif platform in (Platform.LINUX, Platform.MACOS):
        backend = PlatformBackend(
            platform=platform,
            placer=UnixPlacer(settings, platform, elevation or SudoElevation()),
            registrar=NoopPathRegistrar(platform),
        )
    else:
        raise UnsupportedPlatform(str(platform))

    logger.debug(
        "Backend for %s: %s + %s",
        platform,
        type(backend.placer).__name__,
        type(backend.registrar).__name__,
    )
    return backend
