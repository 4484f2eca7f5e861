"""Run-wide aggregate of cleaning results."""

from __future__ import annotations

from dataclasses import dataclass, field

from wd40.models.artifact import ArtifactKind
from wd40.models.clean_result import CleanOutcome, CleanState
from wd40.models.scan_result import IssueKind, ScanIssue


@dataclass(slots=True)
class KindTotals:
    """Counters for a single artifact kind."""

    confirmed: int = 0
    deleted: int = 0
    failed: int = 0
    skipped: int = 0
    bytes_found: int = 0
    bytes_freed: int = 0


@dataclass(slots=True)
class ScanSummary:
    """Aggregated counts, sizes and failures for one run.

    Only one thread may call the ``add_*`` methods; the engine funnels every
    outcome through its collecting thread for that reason.
    """

    dry_run: bool = False
    kinds: dict[ArtifactKind, KindTotals] = field(default_factory=dict)
    failures: list[ScanIssue] = field(default_factory=list)
    warnings: list[ScanIssue] = field(default_factory=list)
    cancelled: bool = False

    def totals(self, kind: ArtifactKind) -> KindTotals:
        """Return (creating if needed) the counters for ``kind``."""
        if kind not in self.kinds:
            self.kinds[kind] = KindTotals()
        return self.kinds[kind]

    def add_outcome(self, outcome: CleanOutcome) -> None:
        """Fold one candidate's finished outcome into the totals.

        Raises:
            ValueError: ``outcome`` has not reached a terminal state.
        """
        if not outcome.state.terminal:
            raise ValueError(f"{outcome.candidate.path} is still {outcome.state.value}")

        totals = self.totals(outcome.candidate.kind)
        totals.confirmed += 1
        totals.bytes_found += outcome.size_bytes
        totals.bytes_freed += outcome.freed_bytes

        match outcome.state:
            case CleanState.DELETED:
                totals.deleted += 1
            case CleanState.DELETE_FAILED:
                totals.failed += 1
                self.failures.append(ScanIssue(outcome.candidate.path, IssueKind.DELETE, outcome.error))
            case CleanState.SKIPPED:
                totals.skipped += 1

        for warning in outcome.warnings:
            self.warnings.append(ScanIssue(outcome.candidate.path, IssueKind.SIZE, warning))

    def add_issue(self, issue: ScanIssue) -> None:
        """Record a scan-time problem (unreadable directory, bad ignore file)."""
        self.failures.append(issue)

    def finalize(self) -> ScanSummary:
        """Put failures and warnings in a stable order and return self."""
        self.failures.sort(key=lambda i: (str(i.path), i.kind.value))
        self.warnings.sort(key=lambda i: (str(i.path), i.message))
        return self

    @property
    def total_confirmed(self) -> int:
        return sum(t.confirmed for t in self.kinds.values())

    @property
    def total_deleted(self) -> int:
        return sum(t.deleted for t in self.kinds.values())

    @property
    def total_bytes_found(self) -> int:
        return sum(t.bytes_found for t in self.kinds.values())

    @property
    def total_bytes_freed(self) -> int:
        return sum(t.bytes_freed for t in self.kinds.values())

    @property
    def total_skipped(self) -> int:
        return sum(t.skipped for t in self.kinds.values())
