"""Recursive size measurement."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from wd40.errors import SizeProbeError

log = logging.getLogger(__name__)


@dataclass(slots=True)
class SizeReport:
    """Apparent size of a directory tree."""

    total_bytes: int = 0
    file_count: int = 0
    warnings: list[str] = field(default_factory=list)


def measure(path: Path | str) -> SizeReport:
    """Sum the apparent sizes of all regular files below ``path``.

    Walks with ``os.scandir`` and an explicit stack, never following
    symlinks. Anything that cannot be listed or stat'ed contributes zero
    bytes and is reported as a warning.
    """
    report = SizeReport()
    stack: list[Path | str] = [path]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                for entry in it:
                    try:
                        if entry.is_file(follow_symlinks=False):
                            report.total_bytes += entry.stat(follow_symlinks=False).st_size
                            report.file_count += 1
                        elif entry.is_dir(follow_symlinks=False):
                            stack.append(entry.path)
                    except OSError as exc:
                        _warn(report, SizeProbeError(entry.path, exc))
        except OSError as exc:
            _warn(report, SizeProbeError(current, exc))
    return report


def _warn(report: SizeReport, error: SizeProbeError) -> None:
    log.warning("Cannot size %s", error)
    report.warnings.append(str(error))
