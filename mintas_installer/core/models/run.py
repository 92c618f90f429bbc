"""
Run report — the outcome of one install or uninstall invocation.

The orchestrator walks a fixed set of stages.  Each transition is
recorded so callers (and tests) can see exactly which path a run took,
including the ``cleaning_up`` stage that every run passes through.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, Field

from mintas_installer.core.models.platform import InstallLocation, Platform, ReleaseAsset


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Stage(StrEnum):
    """States of the install/uninstall state machine."""

    IDLE = "idle"
    DETECTING = "detecting"
    RESOLVING = "resolving"
    DOWNLOADING = "downloading"
    EXTRACTING = "extracting"
    PLACING = "placing"
    REGISTERING = "registering"
    CLEANING_UP = "cleaning_up"
    DONE = "done"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (Stage.DONE, Stage.FAILED)


class StageRecord(BaseModel):
    """A single state transition."""

    stage: Stage
    entered_at: str = Field(default_factory=_now_iso)


class RunReport(BaseModel):
    """Result of an orchestrated run.  Never carries a raised exception."""

    operation: Literal["install", "uninstall"]
    stage: Stage = Stage.IDLE
    history: list[StageRecord] = Field(default_factory=list)

    platform: Platform | None = None
    asset: ReleaseAsset | None = None
    location: InstallLocation | None = None

    error: str | None = None
    error_kind: str | None = None
    failed_stage: Stage | None = None
    warnings: list[str] = Field(default_factory=list)
    changed: bool = False  # whether the install location was written or removed

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str | None = None

    @property
    def ok(self) -> bool:
        return self.stage == Stage.DONE

    @property
    def status(self) -> str:
        if self.stage == Stage.DONE:
            return "done"
        if self.stage == Stage.FAILED:
            return "failed"
        return "running"

    @property
    def stages(self) -> list[Stage]:
        """Visited stages, in order."""
        return [r.stage for r in self.history]

    def enter(self, stage: Stage) -> None:
        self.stage = stage
        self.history.append(StageRecord(stage=stage))
        if stage.terminal:
            self.ended_at = _now_iso()

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(mode="json")
        data["ok"] = self.ok
        data["status"] = self.status
        return data
