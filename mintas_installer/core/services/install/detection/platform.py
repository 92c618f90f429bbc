"""
Detection — host platform classification.

Pure mapping from the kernel name the host reports (``uname -s`` on
POSIX, ``platform.system()`` in Python) to one of the supported
``Platform`` values.  No I/O beyond asking the interpreter.
"""

from __future__ import annotations

import platform as _host

from mintas_installer.core.errors import UnsupportedPlatform
from mintas_installer.core.models.platform import Platform

# (prefix, platform) — first match wins; matching is case-sensitive
_KERNEL_PREFIXES: tuple[tuple[str, Platform], ...] = (
    ("Linux", Platform.LINUX),
    ("Darwin", Platform.MACOS),
    ("MINGW", Platform.WINDOWS),
    ("MSYS", Platform.WINDOWS),
    ("CYGWIN", Platform.WINDOWS),
    ("Windows", Platform.WINDOWS),  # native CPython
)

# Kernel names of POSIX layers running on windows
_POSIX_EMULATION_PREFIXES = ("MINGW", "MSYS", "CYGWIN")


def host_kernel_name() -> str:
    """The kernel name as reported by the running interpreter."""
    return _host.system()


def detect(kernel_name: str | None = None) -> Platform:
    """Classify the host.

    Args:
        kernel_name: Override for the host's kernel name (tests, dry runs).

    Raises:
        UnsupportedPlatform: If no known prefix matches.
    """
    name = host_kernel_name() if kernel_name is None else kernel_name
    for prefix, plat in _KERNEL_PREFIXES:
        if name.startswith(prefix):
            return plat
    raise UnsupportedPlatform(name)


def expected_asset_filename(plat: Platform, binary_name: str = "mintas") -> str:
    return plat.asset_filename(binary_name)


def is_posix_emulation(kernel_name: str | None = None) -> bool:
    """True under MSYS/MinGW/Cygwin, where paths need converting for windows."""
    name = host_kernel_name() if kernel_name is None else kernel_name
    return name.startswith(_POSIX_EMULATION_PREFIXES)
