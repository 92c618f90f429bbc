"""
Resolver — find the platform asset in the latest GitHub release.

One GET to ``/repos/{repo}/releases/latest``, then a scan of the asset
list for a ``browser_download_url`` containing the expected filename.
No retries: a failed query aborts the run.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from typing import Any, Callable

from mintas_installer.core.config.loader import InstallerSettings
from mintas_installer.core.errors import AssetNotFound, NetworkError
from mintas_installer.core.models.platform import Platform, ReleaseAsset

logger = logging.getLogger(__name__)

UrlOpener = Callable[..., Any]


class ReleaseResolver:
    """Resolve download URLs from the release-hosting API."""

    def __init__(self, settings: InstallerSettings, *, urlopen: UrlOpener | None = None) -> None:
        self.settings = settings
        self._urlopen = urlopen or urllib.request.urlopen

    def fetch_latest(self) -> dict[str, Any]:
        """Return the decoded "latest release" document.

        Raises:
            NetworkError: On transport failure, a non-2xx status or a
                payload that is not a JSON object.
        """
        api_url = self.settings.api_url
        req = urllib.request.Request(
            api_url,
            headers={
                "Accept": "application/vnd.github+json",
                "User-Agent": self.settings.user_agent,
            },
        )
        logger.debug("GET %s", api_url)
        try:
            with self._urlopen(req, timeout=self.settings.timeout) as resp:
                status = getattr(resp, "status", 200)
                if not 200 <= status < 300:
                    raise NetworkError(f"Release query returned HTTP {status}: {api_url}")
                body = resp.read()
        except urllib.error.HTTPError as e:
            raise NetworkError(f"Release query returned HTTP {e.code}: {api_url}") from e
        except (urllib.error.URLError, OSError) as e:
            raise NetworkError(f"Failed to fetch latest release from {api_url}: {e}") from e

        try:
            data = json.loads(body)
        except (ValueError, UnicodeDecodeError) as e:
            raise NetworkError(f"Malformed release metadata from {api_url}: {e}") from e

        if not isinstance(data, dict):
            raise NetworkError(
                f"Malformed release metadata from {api_url}: expected an object, got {type(data).__name__}"
            )
        return data

    def resolve(self, plat: Platform) -> ReleaseAsset:
        """Find this platform's asset in the latest release.

        Raises:
            NetworkError: If the release query fails.
            AssetNotFound: If no asset URL contains the expected filename.
        """
        filename = plat.asset_filename(self.settings.binary_name)
        data = self.fetch_latest()
        return match_asset(data, plat, filename, repository=self.settings.repository)

    def resolve_download_url(self, plat: Platform) -> str:
        return self.resolve(plat).download_url


def match_asset(
    release: dict[str, Any],
    plat: Platform,
    filename: str,
    *,
    repository: str = "",
) -> ReleaseAsset:
    """Pick the first asset whose download URL contains ``filename``."""
    assets = release.get("assets", [])
    if not isinstance(assets, list):
        raise NetworkError("Malformed release metadata: 'assets' is not a list")

    tag = str(release.get("tag_name", ""))
    for asset in assets:
        if not isinstance(asset, dict):
            continue
        url = asset.get("browser_download_url")
        if not isinstance(url, str) or filename not in url:
            continue
        logger.debug("Matched %s in release %s", filename, tag or "<untagged>")
        return ReleaseAsset(
            platform=plat,
            filename=filename,
            download_url=url,
            tag=tag,
            size_bytes=_size_of(asset),
        )

    available = [a.get("name", "") for a in assets[:10] if isinstance(a, dict)]
    logger.debug("No asset matching %s; available: %s", filename, available)
    raise AssetNotFound(filename, repository)


def _size_of(asset: dict[str, Any]) -> int:
    """Reported asset size; 0 when missing or not a number."""
    try:
        return max(int(asset.get("size") or 0), 0)
    except (TypeError, ValueError, OverflowError):
        logger.debug("Ignoring bad asset size %r", asset.get("size"))
        return 0
