"""
Domain models — Pydantic types for the installer.

    from mintas_installer.core.models import Platform, ReleaseAsset, RunReport
"""

from mintas_installer.core.models.platform import InstallLocation, Platform, ReleaseAsset
from mintas_installer.core.models.run import RunReport, Stage, StageRecord

__all__ = [
    # platform.py
    "InstallLocation",
    "Platform",
    "ReleaseAsset",
    # run.py
    "RunReport",
    "Stage",
    "StageRecord",
]
