"""Cleaning outcome dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from wd40.models.artifact import Candidate


class CleanState(Enum):
    """Per-candidate deletion state machine.

    ``PENDING -> SIZING -> (DRY_RUN_SKIPPED | DELETING -> (DELETED | DELETE_FAILED))``

    A candidate still ``PENDING`` when the run is cancelled ends as ``SKIPPED``.
    """

    PENDING = "pending"
    SIZING = "sizing"
    DRY_RUN_SKIPPED = "dry_run_skipped"
    DELETING = "deleting"
    DELETED = "deleted"
    DELETE_FAILED = "delete_failed"
    SKIPPED = "skipped"

    @property
    def terminal(self) -> bool:
        return self in (
            CleanState.DRY_RUN_SKIPPED,
            CleanState.DELETED,
            CleanState.DELETE_FAILED,
            CleanState.SKIPPED,
        )


@dataclass(slots=True)
class CleanOutcome:
    """Result of sizing and (maybe) deleting one candidate."""

    candidate: Candidate
    state: CleanState = CleanState.PENDING
    size_bytes: int = 0
    file_count: int = 0
    warnings: list[str] = field(default_factory=list)
    error: str = ""

    @property
    def freed_bytes(self) -> int:
        """Bytes actually reclaimed; only a completed deletion counts."""
        return self.size_bytes if self.state is CleanState.DELETED else 0
