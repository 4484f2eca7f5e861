"""Human-readable summaries and the structured audit log."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, TextIO

from wd40.models.artifact import ArtifactKind
from wd40.models.clean_result import CleanOutcome
from wd40.models.scan_result import ScanIssue
from wd40.models.summary import ScanSummary
from wd40.utils import bytes_to_human

log = logging.getLogger(__name__)

AUDIT_FORMAT_VERSION = 1


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class AuditReporter:
    """Writes one JSON object per line to an append-only sink.

    Records, in order::

        {"event": "run_start", "ts": ..., "root": ..., "mode": "dry-run"|"live", ...}
        {"event": "candidate", "ts": ..., "kind": ..., "path": ..., "bytes": ..., "outcome": ...}
        {"event": "issue", "ts": ..., "path": ..., "stage": ..., "message": ...}
        {"event": "summary", "ts": ..., "kinds": {...}, "bytes_freed": ..., ...}

    The reporter never decides where the log lives; the caller hands it an
    open text stream (or None to disable the audit trail).
    """

    def __init__(self, sink: TextIO | None = None, *, clock: Callable[[], str] = _utc_now) -> None:
        self._sink = sink
        self._clock = clock
        self.records_written = 0

    def start(self, root: Path, *, dry_run: bool, kinds: frozenset[ArtifactKind] | None = None) -> None:
        """Write the run header."""
        record: dict[str, Any] = {
            "event": "run_start",
            "version": AUDIT_FORMAT_VERSION,
            "root": str(root),
            "mode": "dry-run" if dry_run else "live",
        }
        if kinds is not None:
            record["kinds"] = sorted(k.label for k in kinds)
        self._write(record)

    def record_outcome(self, outcome: CleanOutcome) -> None:
        """Write the final state of one candidate."""
        record: dict[str, Any] = {
            "event": "candidate",
            "kind": outcome.candidate.kind.label,
            "path": str(outcome.candidate.path),
            "bytes": outcome.size_bytes,
            "outcome": outcome.state.value,
            "signals": list(outcome.candidate.signals),
        }
        if outcome.error:
            record["error"] = outcome.error
        if outcome.warnings:
            record["warnings"] = list(outcome.warnings)
        self._write(record)

    def record_issue(self, issue: ScanIssue) -> None:
        """Write a non-fatal scan problem."""
        self._write(
            {
                "event": "issue",
                "path": str(issue.path),
                "stage": issue.kind.value,
                "message": issue.message,
            }
        )

    def finish(self, summary: ScanSummary) -> None:
        """Write the closing summary record."""
        self._write(
            {
                "event": "summary",
                "mode": "dry-run" if summary.dry_run else "live",
                "cancelled": summary.cancelled,
                "kinds": {
                    kind.label: {
                        "confirmed": totals.confirmed,
                        "deleted": totals.deleted,
                        "failed": totals.failed,
                        "skipped": totals.skipped,
                        "bytes_found": totals.bytes_found,
                        "bytes_freed": totals.bytes_freed,
                    }
                    for kind, totals in _ordered(summary)
                },
                "bytes_found": summary.total_bytes_found,
                "bytes_freed": summary.total_bytes_freed,
                "skipped": summary.total_skipped,
                "failures": len(summary.failures),
                "warnings": len(summary.warnings),
            }
        )
        log.info(
            "Run finished: %d candidates, %d deleted, %d bytes freed",
            summary.total_confirmed,
            summary.total_deleted,
            summary.total_bytes_freed,
        )

    def _write(self, record: dict[str, Any]) -> None:
        if self._sink is None:
            return
        line = {"ts": self._clock(), **record}
        self._sink.write(json.dumps(line, ensure_ascii=False) + "\n")
        self._sink.flush()
        self.records_written += 1


def _ordered(summary: ScanSummary) -> list[tuple[ArtifactKind, Any]]:
    order = list(ArtifactKind)
    return sorted(summary.kinds.items(), key=lambda item: order.index(item[0]))


def summary_lines(summary: ScanSummary) -> list[str]:
    """Render ``summary`` as plain text lines for the terminal."""
    lines: list[str] = []
    for kind, totals in _ordered(summary):
        if summary.dry_run:
            lines.append(
                f"{kind.display_name:32s} {totals.confirmed:>5,}  "
                f"would free {bytes_to_human(totals.bytes_found)}"
            )
        else:
            failed = f", {totals.failed} failed" if totals.failed else ""
            lines.append(
                f"{kind.display_name:32s} {totals.deleted:>5,}/{totals.confirmed:<5,} "
                f"freed {bytes_to_human(totals.bytes_freed)}{failed}"
            )

    if summary.failures:
        lines.append("")
        lines.append(f"{len(summary.failures)} problem(s):")
        for issue in summary.failures:
            lines.append(f"  [{issue.kind.value}] {issue.path}: {issue.message}")

    if summary.warnings:
        lines.append("")
        lines.append(f"{len(summary.warnings)} size warning(s); sizes may be under-reported.")

    if summary.cancelled:
        lines.append("")
        skipped = f"; {summary.total_skipped:,} skipped" if summary.total_skipped else ""
        lines.append(f"Run was cancelled before all candidates were processed{skipped}.")

    return lines
