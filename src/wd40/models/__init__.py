"""wd40 data models."""

from wd40.models.artifact import ArtifactKind, Candidate, Confidence
from wd40.models.clean_result import CleanOutcome, CleanState
from wd40.models.options import ALL_KINDS, ScanOptions
from wd40.models.rule import Signal, ValidationRule
from wd40.models.scan_result import IssueKind, ScanIssue, ScanResult
from wd40.models.summary import KindTotals, ScanSummary

__all__ = [
    "ALL_KINDS",
    "ArtifactKind",
    "Candidate",
    "CleanOutcome",
    "CleanState",
    "Confidence",
    "IssueKind",
    "KindTotals",
    "ScanIssue",
    "ScanOptions",
    "ScanResult",
    "ScanSummary",
    "Signal",
    "ValidationRule",
]
