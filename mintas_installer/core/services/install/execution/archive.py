"""
Execution — archive extraction.

Windows assets are zip files holding a directory tree; linux and macOS
assets are gzip-compressed tarballs holding a single ``mintas``
executable.  Members that would land outside the staging directory are
refused before anything is written.
"""

from __future__ import annotations

import logging
import tarfile
import zipfile
import zlib
from pathlib import Path, PurePosixPath

from mintas_installer.core.errors import ExtractionError
from mintas_installer.core.models.platform import Platform

logger = logging.getLogger(__name__)


def _check_member_name(name: str) -> None:
    """Reject absolute paths and ``..`` components."""
    normalized = name.replace("\\", "/")
    path = PurePosixPath(normalized)
    if path.is_absolute() or normalized.startswith("/") or (len(normalized) > 1 and normalized[1] == ":"):
        raise ExtractionError(f"Refusing absolute archive member: {name}")
    if ".." in path.parts:
        raise ExtractionError(f"Refusing archive member outside destination: {name}")


class Unpacker:
    """Extract a downloaded asset into a staging directory."""

    def __init__(self, binary_name: str = "mintas") -> None:
        self.binary_name = binary_name

    def extract(self, archive: Path, plat: Platform, destination: Path) -> Path:
        """Unpack ``archive`` according to ``plat``'s asset format.

        Returns:
            The payload path: ``destination`` itself on windows (a tree),
            ``destination / binary_name`` on linux/macOS.

        Raises:
            ExtractionError: Corrupt or unexpected archive, unsafe members,
                missing payload, or an unwritable destination.
        """
        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExtractionError(f"Cannot create staging directory {destination}: {e}") from e

        logger.debug("Extracting %s (%s) into %s", archive, plat.archive_format, destination)
        if plat.archive_format == "zip":
            self._extract_zip(archive, destination)
        else:
            self._extract_tar(archive, destination)

        if plat is Platform.WINDOWS:
            if not any(destination.iterdir()):
                raise ExtractionError(f"Archive {archive.name} is empty")
            return destination

        payload = destination / self.binary_name
        if not payload.is_file():
            raise ExtractionError(f"Archive {archive.name} does not contain '{self.binary_name}'")
        return payload

    def _extract_zip(self, archive: Path, destination: Path) -> None:
        try:
            with zipfile.ZipFile(archive) as zf:
                for name in zf.namelist():
                    _check_member_name(name)
                zf.extractall(destination)
        except (zipfile.BadZipFile, zlib.error, EOFError) as e:
            raise ExtractionError(f"Corrupt zip archive {archive.name}: {e}") from e
        except RuntimeError as e:
            # encrypted members; NotImplementedError for unknown compression methods
            raise ExtractionError(f"Cannot unpack zip archive {archive.name}: {e}") from e
        except OSError as e:
            raise ExtractionError(f"Extraction failed for {archive.name}: {e}") from e

    def _extract_tar(self, archive: Path, destination: Path) -> None:
        try:
            with tarfile.open(archive, "r:gz") as tar:
                for member in tar.getmembers():
                    _check_member_name(member.name)
                # "data" also rejects links escaping the tree and device files
                tar.extractall(destination, filter="data")
        except tarfile.FilterError as e:
            raise ExtractionError(f"Refusing unsafe archive member in {archive.name}: {e}") from e
        except (tarfile.TarError, EOFError, zlib.error) as e:
            raise ExtractionError(f"Corrupt tar.gz archive {archive.name}: {e}") from e
        except OSError as e:
            raise ExtractionError(f"Extraction failed for {archive.name}: {e}") from e
