"""
Installer errors — the failure taxonomy of the install pipeline.

Every stage raises a subclass of ``InstallError``.  The orchestrator
catches them at its boundary and turns them into a single message on
the ``RunReport``; nothing above the orchestrator sees these raised.

Fatal errors abort the remaining stages and go straight to cleanup.
``PathRegistrationWarning`` is the only non-fatal one: the artifact is
already placed when it can happen.
"""

from __future__ import annotations


class InstallError(Exception):
    """Base class for all install/uninstall failures."""

    kind = "InstallError"
    fatal = True

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str | bool]:
        return {"kind": self.kind, "message": self.message, "fatal": self.fatal}


class UnsupportedPlatform(InstallError):
    """The host kernel name matches no supported platform."""

    kind = "UnsupportedPlatform"

    def __init__(self, kernel_name: str) -> None:
        super().__init__(f"Unsupported OS: {kernel_name or '<unknown>'}")
        self.kernel_name = kernel_name


class NetworkError(InstallError):
    """The release-metadata query failed (transport, status or payload)."""

    kind = "NetworkError"


class AssetNotFound(InstallError):
    """The latest release has no asset for this platform."""

    kind = "AssetNotFound"

    def __init__(self, filename: str, repository: str = "") -> None:
        where = f" in latest release of {repository}" if repository else " in latest release"
        super().__init__(f"Failed to find {filename}{where}")
        self.filename = filename
        self.repository = repository


class DownloadError(InstallError):
    """The asset download failed."""

    kind = "DownloadError"


class ExtractionError(InstallError):
    """The archive is corrupt, unexpected, or cannot be unpacked."""

    kind = "ExtractionError"


class ElevationDenied(InstallError):
    """A privileged command was refused or could not be elevated."""

    kind = "ElevationDenied"


class PlacementError(InstallError):
    """The payload could not be moved into (or removed from) its location."""

    kind = "PlacementError"

    def __init__(self, message: str, *, elevation_declined: bool = False) -> None:
        super().__init__(message)
        self.elevation_declined = elevation_declined


class PathRegistrationWarning(InstallError):
    """The user PATH could not be updated.  Reported, never fatal."""

    kind = "PathRegistrationWarning"
    fatal = False
