"""
Adapters — injected capabilities with external side effects.

The install pipeline never escalates privileges or touches the OS
environment store directly; it is handed one of these instead, so tests
can swap in the doubles from ``mock``.
"""

from mintas_installer.adapters.base import ElevationProvider, UserEnvironmentStore
from mintas_installer.adapters.elevation import SudoElevation
from mintas_installer.adapters.powershell import PowerShellEnvironmentStore

__all__ = [
    "ElevationProvider",
    "PowerShellEnvironmentStore",
    "SudoElevation",
    "UserEnvironmentStore",
]
