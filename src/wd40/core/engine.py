"""Scanning and cleaning orchestration engine."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Iterable, Sequence, TypeVar

from wd40.core.classifier import Classifier
from wd40.core.deleter import DeletionExecutor
from wd40.core.registry import RuleRegistry
from wd40.core.reporter import AuditReporter
from wd40.core.walker import TreeWalker, WalkNode
from wd40.models.artifact import ArtifactKind, Candidate
from wd40.models.clean_result import CleanOutcome, CleanState
from wd40.models.options import ScanOptions
from wd40.models.scan_result import IssueKind, ScanIssue, ScanResult
from wd40.models.summary import ScanSummary
from wd40.rules.rust import is_orphaned_target

log = logging.getLogger(__name__)

CandidateCallback = Callable[[Candidate], None]
OutcomeCallback = Callable[[CleanOutcome], None]

T = TypeVar("T")
Item = TypeVar("Item")


class CleanEngine:
    """Orchestrates walking, classification, sizing and deletion.

    Work fans out to a fixed-size thread pool, but results always come back
    to the calling thread, which is the only one that touches the
    :class:`ScanSummary`, the reporter and the callbacks.
    """

    def __init__(self, registry: RuleRegistry, options: ScanOptions | None = None) -> None:
        self.registry = registry
        self.options = options or ScanOptions()
        self.classifier = Classifier(registry)
        self._cancel = threading.Event()

    # ── cancellation ────────────────────────────────────────────────────

    def cancel(self) -> None:
        """Ask workers to stop after their current directory or candidate.

        A deletion that is already running is allowed to finish.
        """
        if not self._cancel.is_set():
            log.info("Cancellation requested")
        self._cancel.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    # ── scan ────────────────────────────────────────────────────────────

    def scan(self, root: Path | str, on_candidate: CandidateCallback | None = None) -> ScanResult:
        """Find confirmed artifact directories below ``root``. Never deletes.

        With more than one worker, the tree is walked ``fan_out_depth``
        levels deep on this thread and each remaining subtree is handed to
        the pool.

        Raises:
            ScanError: ``root`` is missing or unreadable.
        """
        walker = self._make_walker()
        node = walker.root_node(root)
        result = ScanResult(root=node.path)

        def accept(candidates: Iterable[Candidate], issues: Iterable[ScanIssue]) -> None:
            for candidate in candidates:
                if self._filtered_out(candidate):
                    continue
                result.candidates.append(candidate)
                if on_candidate:
                    on_candidate(candidate)
            result.issues.extend(issues)

        def walk_failed(subtree: WalkNode, exc: Exception) -> None:
            result.issues.append(ScanIssue(subtree.path, IssueKind.READ, str(exc)))

        if self.options.workers > 1:
            found, frontier = walker.split(node, self.options.fan_out_depth)
            accept(found, walker.issues)
            self._run_pool(frontier, self._walk_subtree, lambda pair: accept(*pair), walk_failed)
        else:
            accept(walker.walk_node(node), ())
            result.issues.extend(walker.issues)

        result.candidates.sort(key=lambda c: c.path)
        result.cancelled = self.cancelled
        log.info("Scan of %s found %d candidates", result.root, len(result.candidates))
        return result

    def _filtered_out(self, candidate: Candidate) -> bool:
        # --orphaned-only narrows Rust targets and leaves other kinds alone
        return (
            self.options.orphaned_only
            and candidate.kind is ArtifactKind.RUST_TARGET
            and not is_orphaned_target(candidate)
        )

    def _make_walker(self) -> TreeWalker:
        return TreeWalker(
            self.classifier,
            kinds=self.options.kinds,
            max_depth=self.options.max_depth,
            should_stop=self._cancel.is_set,
        )

    def _walk_subtree(self, node: WalkNode) -> tuple[list[Candidate], list[ScanIssue]]:
        walker = self._make_walker()
        return list(walker.walk_node(node)), walker.issues

    # ── clean ───────────────────────────────────────────────────────────

    def clean(
        self,
        scan: ScanResult,
        reporter: AuditReporter | None = None,
        on_outcome: OutcomeCallback | None = None,
    ) -> ScanSummary:
        """Size and delete (or, in dry-run, only size) the scanned candidates.

        A failed deletion is recorded and the run carries on. Candidates
        not yet started when the run is cancelled are recorded as skipped.

        Returns:
            The finalized summary for the run.
        """
        reporter = reporter or AuditReporter()
        summary = ScanSummary(dry_run=self.options.dry_run)
        reporter.start(scan.root, dry_run=self.options.dry_run, kinds=self.options.kinds)

        for issue in scan.issues:
            summary.add_issue(issue)
            reporter.record_issue(issue)

        executor = DeletionExecutor(dry_run=self.options.dry_run, verify=self._still_confirmed)

        def process(candidate: Candidate) -> CleanOutcome:
            if self.cancelled:
                return CleanOutcome(candidate=candidate, state=CleanState.SKIPPED)
            return executor.process(candidate)

        def collect(outcome: CleanOutcome) -> None:
            summary.add_outcome(outcome)
            reporter.record_outcome(outcome)
            if on_outcome:
                on_outcome(outcome)

        def process_failed(candidate: Candidate, exc: Exception) -> None:
            collect(CleanOutcome(candidate=candidate, state=CleanState.DELETE_FAILED, error=str(exc)))

        # Deletions always run off the main thread so Ctrl-C cannot land mid-rmtree.
        self._run_pool(scan.candidates, process, collect, process_failed)

        summary.cancelled = scan.cancelled or self.cancelled
        summary.finalize()
        reporter.finish(summary)
        return summary

    def run(
        self,
        root: Path | str,
        reporter: AuditReporter | None = None,
        on_outcome: OutcomeCallback | None = None,
    ) -> ScanSummary:
        """Scan ``root`` and clean everything found, in one call."""
        return self.clean(self.scan(root), reporter=reporter, on_outcome=on_outcome)

    def _still_confirmed(self, candidate: Candidate) -> bool:
        return self.classifier.classify(candidate.path).kind is candidate.kind

    # ── pool ────────────────────────────────────────────────────────────

    def _run_pool(
        self,
        items: Sequence[Item],
        task: Callable[[Item], T],
        collect: Callable[[T], None],
        on_error: Callable[[Item, Exception], None],
    ) -> None:
        """Run ``task`` over ``items`` on the pool, collecting on this thread.

        A task that raises is logged and handed to ``on_error`` so the rest
        of the run carries on. Ctrl-C while waiting turns into a cooperative
        cancel: queued work is skipped, running work is waited for.
        """
        if not items:
            return
        max_workers = min(self.options.workers, len(items))
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="wd40") as pool:
            pending: dict[Future[T], Item] = {pool.submit(task, item): item for item in items}
            while pending:
                try:
                    for future in as_completed(list(pending)):
                        item = pending.pop(future)
                        try:
                            result = future.result()
                        except Exception as exc:
                            log.exception("Unexpected error while processing %s", item)
                            on_error(item, exc)
                        else:
                            collect(result)
                except KeyboardInterrupt:
                    log.warning("Interrupted, waiting for running work to finish")
                    self.cancel()
