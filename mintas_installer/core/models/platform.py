"""
Platform and release models — what we install, and for which OS.

``Platform`` is derived once per run from the host kernel name and
never persisted.  It statically determines the expected asset filename
and the archive format of that asset.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class Platform(StrEnum):
    """The closed set of supported host platforms."""

    WINDOWS = "windows"
    LINUX = "linux"
    MACOS = "macos"

    @property
    def archive_format(self) -> str:
        """``zip`` on windows, ``gztar`` everywhere else."""
        return "zip" if self is Platform.WINDOWS else "gztar"

    @property
    def archive_suffix(self) -> str:
        return ".zip" if self is Platform.WINDOWS else ".tar.gz"

    def asset_filename(self, binary_name: str = "mintas") -> str:
        """Expected release asset name, e.g. ``mintas-linux.tar.gz``."""
        return f"{binary_name}-{self.value}{self.archive_suffix}"


class ReleaseAsset(BaseModel):
    """A (platform, filename, download URL) triple resolved for one run."""

    model_config = ConfigDict(frozen=True)

    platform: Platform
    filename: str
    download_url: str
    tag: str = ""
    size_bytes: int = 0


class InstallLocation(BaseModel):
    """Where the product lives once installed.

    On windows this is the application directory (and the same string is
    the PATH entry).  On linux/macos it is the binary itself inside the
    canonical bin directory; no PATH entry is tracked there.
    """

    model_config = ConfigDict(frozen=True)

    platform: Platform
    path: str
    is_directory: bool = False
    path_entry: str | None = None
