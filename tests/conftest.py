"""
Shared test fixtures and configuration.

Network access goes through ``fake_http`` (an urlopen stand-in), install
roots live under ``tmp_path``, and archives are built on the fly.
"""

from __future__ import annotations

import functools
import io
import json
import tarfile
import urllib.error
import zipfile
from pathlib import Path

import pytest

from mintas_installer.adapters.mock import InMemoryEnvironmentStore, MockElevation
from mintas_installer.core.config.loader import InstallerSettings
from mintas_installer.core.services.install.backends import build_backend
from mintas_installer.core.services.install.execution.download import Fetcher
from mintas_installer.core.services.install.orchestration.orchestrator import Orchestrator
from mintas_installer.core.services.install.resolver.release import ReleaseResolver

API_URL = "https://api.github.com/repos/NotBeastR/mintas-scr/releases/latest"
DOWNLOAD_BASE = "https://github.com/NotBeastR/mintas-scr/releases/download/v1.2.0"

LINUX_BINARY = b"#!/bin/sh\necho mintas\n"
WINDOWS_TREE = {
    "mintas.exe": b"MZ fake exe",
    "lib/core.dll": b"fake dll",
    "README.txt": b"Mintas for windows\n",
}


class FakeResponse:
    """Just enough of ``http.client.HTTPResponse`` for the resolver/fetcher."""

    def __init__(self, body: bytes, status: int = 200, headers: dict[str, str] | None = None):
        self._buf = io.BytesIO(body)
        self.status = status
        self.headers = headers if headers is not None else {"Content-Length": str(len(body))}

    def read(self, n: int = -1) -> bytes:
        return self._buf.read(n)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeOpener:
    """Route table standing in for ``urllib.request.urlopen``."""

    def __init__(self):
        self._routes: dict[str, object] = {}
        self.requests: list[object] = []

    def route(self, url: str, body: bytes | str = b"", status: int = 200, headers=None) -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._routes[url] = (body, status, headers)

    def fail(self, url: str, exc: BaseException) -> None:
        self._routes[url] = exc

    def __call__(self, req, timeout=None):
        url = getattr(req, "full_url", req)
        self.requests.append(req)
        entry = self._routes.get(url)
        if entry is None:
            raise urllib.error.URLError(f"no route to {url}")
        if isinstance(entry, BaseException):
            raise entry
        body, status, headers = entry
        if status >= 400:
            raise urllib.error.HTTPError(url, status, "error", hdrs=None, fp=None)
        return FakeResponse(body, status=status, headers=headers)

    @property
    def urls(self) -> list[str]:
        return [getattr(r, "full_url", r) for r in self.requests]


def release_payload(*filenames: str, tag: str = "v1.2.0") -> str:
    """A GitHub "latest release" document listing ``filenames`` as assets."""
    return json.dumps({
        "tag_name": tag,
        "assets": [
            {
                "name": name,
                "size": 1234,
                "browser_download_url": f"{DOWNLOAD_BASE}/{name}",
            }
            for name in filenames
        ],
    })


def make_tar_gz(path: Path, files: dict[str, bytes], mode: int = 0o755) -> Path:
    with tarfile.open(path, "w:gz") as tar:
        for name, data in files.items():
            info = tarfile.TarInfo(name=name)
            info.size = len(data)
            info.mode = mode
            tar.addfile(info, io.BytesIO(data))
    return path


def make_zip(path: Path, files: dict[str, bytes]) -> Path:
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    return path


@pytest.fixture
def fake_http() -> FakeOpener:
    return FakeOpener()


@pytest.fixture
def settings(tmp_path: Path) -> InstallerSettings:
    """Settings whose install roots live under tmp_path."""
    bin_dir = tmp_path / "usr-local-bin"
    bin_dir.mkdir()
    return InstallerSettings(
        unix_install_dir=str(bin_dir),
        windows_install_root=str(tmp_path / "LocalAppData"),
    )


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Parent dir for temporary workspaces, so tests can see leftovers."""
    root = tmp_path / "tmp"
    root.mkdir()
    return root


@pytest.fixture
def linux_archive(tmp_path: Path) -> Path:
    return make_tar_gz(tmp_path / "mintas-linux.tar.gz", {"mintas": LINUX_BINARY})


@pytest.fixture
def windows_archive(tmp_path: Path) -> Path:
    return make_zip(tmp_path / "mintas-windows.zip", WINDOWS_TREE)


@pytest.fixture
def elevation() -> MockElevation:
    return MockElevation()


@pytest.fixture
def env_store() -> InMemoryEnvironmentStore:
    return InMemoryEnvironmentStore(r"C:\Windows\system32;C:\Tools")


@pytest.fixture
def make_orchestrator(settings, fake_http, workspace_root, elevation, env_store):
    """Build an Orchestrator wired to the fakes; keyword args override."""

    def _make(kernel_name: str = "Linux", **kwargs) -> Orchestrator:
        kwargs.setdefault("resolver", ReleaseResolver(settings, urlopen=fake_http))
        kwargs.setdefault("fetcher", Fetcher(urlopen=fake_http))
        kwargs.setdefault(
            "backend_factory",
            functools.partial(
                build_backend,
                elevation=elevation,
                env_store=env_store,
                path_converter=lambda p: p,
            ),
        )
        kwargs.setdefault("workspace_root", workspace_root)
        return Orchestrator(settings, kernel_name=kernel_name, **kwargs)

    return _make


@pytest.fixture
def linux_release(fake_http, linux_archive) -> str:
    """Serve a latest release with the linux asset.  Returns its URL."""
    url = f"{DOWNLOAD_BASE}/mintas-linux.tar.gz"
    fake_http.route(API_URL, release_payload("mintas-windows.zip", "mintas-linux.tar.gz", "mintas-macos.tar.gz"))
    fake_http.route(url, linux_archive.read_bytes())
    return url


@pytest.fixture
def windows_release(fake_http, windows_archive) -> str:
    """Serve a latest release with the windows asset.  Returns its URL."""
    url = f"{DOWNLOAD_BASE}/mintas-windows.zip"
    fake_http.route(API_URL, release_payload("mintas-windows.zip", "mintas-linux.tar.gz", "mintas-macos.tar.gz"))
    fake_http.route(url, windows_archive.read_bytes())
    return url
