"""Sizing and removal of confirmed candidates."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Callable

from wd40.core.sizer import SizeReport, measure
from wd40.errors import DeleteFailed
from wd40.models.artifact import Candidate
from wd40.models.clean_result import CleanOutcome, CleanState

log = logging.getLogger(__name__)

Verifier = Callable[[Candidate], bool]
Sizer = Callable[[Path], SizeReport]


class DeletionExecutor:
    """Runs one candidate through the sizing/deletion state machine.

    In dry-run mode the candidate is sized and reported but never touched.
    In live mode the directory is re-verified right before removal, so a
    tree that changed since the scan is left alone. A failure part-way
    through ``rmtree`` leaves a partially removed directory; there is no
    rollback.
    """

    def __init__(
        self,
        *,
        dry_run: bool,
        verify: Verifier | None = None,
        sizer: Sizer = measure,
    ) -> None:
        self.dry_run = dry_run
        self._verify = verify
        self._sizer = sizer

    def process(self, candidate: Candidate) -> CleanOutcome:
        """Size, then delete (or skip in dry-run) a single candidate."""
        outcome = CleanOutcome(candidate=candidate)

        self._transition(outcome, CleanState.SIZING)
        report = self._sizer(candidate.path)
        outcome.size_bytes = report.total_bytes
        outcome.file_count = report.file_count
        outcome.warnings.extend(report.warnings)

        if self.dry_run:
            self._transition(outcome, CleanState.DRY_RUN_SKIPPED)
            return outcome

        self._transition(outcome, CleanState.DELETING)
        try:
            self._delete(candidate)
        except DeleteFailed as exc:
            log.warning("Delete failed: %s", exc)
            outcome.error = exc.reason
            self._transition(outcome, CleanState.DELETE_FAILED)
            return outcome

        self._transition(outcome, CleanState.DELETED)
        return outcome

    def _delete(self, candidate: Candidate) -> None:
        path = candidate.path
        try:
            if path.is_symlink():
                raise DeleteFailed(path, "refusing to delete through a symlink")
            if not path.is_dir():
                raise DeleteFailed(path, "no longer exists")
            if self._verify is not None and not self._verify(candidate):
                raise DeleteFailed(path, f"no longer matches {candidate.kind.label} markers")
            shutil.rmtree(path)
        except OSError as exc:
            raise DeleteFailed(path, str(exc)) from exc

    @staticmethod
    def _transition(outcome: CleanOutcome, state: CleanState) -> None:
        log.debug("%s: %s -> %s", outcome.candidate.path, outcome.state.value, state.value)
        outcome.state = state
