"""Scan result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from wd40.models.artifact import Candidate


class IssueKind(Enum):
    """Where in the pipeline a non-fatal problem was hit."""

    READ = "read"
    IGNORE_FILE = "ignore_file"
    SIZE = "size"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class ScanIssue:
    """A localized failure that did not stop the run."""

    path: Path
    kind: IssueKind
    message: str


@dataclass(slots=True)
class ScanResult:
    """Confirmed candidates found under ``root``, plus walk problems."""

    root: Path
    candidates: list[Candidate] = field(default_factory=list)
    issues: list[ScanIssue] = field(default_factory=list)
    cancelled: bool = False
