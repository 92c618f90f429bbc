"""
Execution — asset download.

Streams an HTTP response body to a file.  Redirects (GitHub sends
assets through a CDN) are followed by urllib.  A partial file left by
a failure is not repaired; the workspace cleanup discards it.
"""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from pathlib import Path
from typing import Any, Callable

from mintas_installer.core.errors import DownloadError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


def _fmt_size(n: int | float) -> str:
    """Format byte count to human-readable string."""
    for unit in ("B", "KB", "MB", "GB"):
        if n < 1024:
            return f"{n:.1f} {unit}"
        n /= 1024
    return f"{n:.1f} TB"


class Fetcher:
    """Download URLs to local paths."""

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        user_agent: str = "mintas-installer/1.0",
        urlopen: Callable[..., Any] | None = None,
        chunk_size: int = _CHUNK_SIZE,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.chunk_size = chunk_size
        self._urlopen = urlopen or urllib.request.urlopen

    def download(self, url: str, destination: Path) -> int:
        """Stream ``url`` into ``destination``.

        Returns:
            Number of bytes written.

        Raises:
            DownloadError: On a non-success status, a transport failure,
                a short body or a local write failure.
        """
        req = urllib.request.Request(
            url,
            headers={"Accept": "application/octet-stream", "User-Agent": self.user_agent},
        )
        logger.debug("Downloading %s -> %s", url, destination)
        written = 0
        try:
            with self._urlopen(req, timeout=self.timeout) as resp:
                status = getattr(resp, "status", 200)
                if not 200 <= status < 300:
                    raise DownloadError(f"Download failed: HTTP {status} for {url}")
                expected = _content_length(resp)
                with open(destination, "wb") as f:
                    for chunk in iter(lambda: resp.read(self.chunk_size), b""):
                        f.write(chunk)
                        written += len(chunk)
        except urllib.error.HTTPError as e:
            raise DownloadError(f"Download failed: HTTP {e.code} for {url}") from e
        except (urllib.error.URLError, OSError) as e:
            raise DownloadError(f"Download failed: {e}") from e

        if expected is not None and written != expected:
            raise DownloadError(
                f"Download incomplete: got {written} of {expected} bytes from {url}"
            )

        logger.info("Downloaded %s (%s)", destination.name, _fmt_size(written))
        return written


def _content_length(resp: Any) -> int | None:
    headers = getattr(resp, "headers", None)
    if headers is None:
        return None
    raw = headers.get("Content-Length")
    try:
        return int(raw) if raw is not None else None
    except (TypeError, ValueError):
        return None
