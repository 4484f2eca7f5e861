"""Artifact classification."""

from __future__ import annotations

import logging
from pathlib import Path

from wd40.core.registry import RuleRegistry
from wd40.models.artifact import Candidate, Confidence

log = logging.getLogger(__name__)


class Classifier:
    """Turns a directory into a :class:`Candidate` verdict.

    Rules are tried in registry priority order and the first confirmed
    match wins. A directory that also satisfies a lower-priority rule is
    not an error; the overlap is only reported at debug level.
    """

    def __init__(self, registry: RuleRegistry) -> None:
        self._rules = registry.ordered()

    def classify(self, path: Path) -> Candidate:
        """Classify ``path``. Never raises; unreadable markers count as absent."""
        for index, rule in enumerate(self._rules):
            confirmed, evidence = rule.evaluate(path)
            if not confirmed:
                continue
            if log.isEnabledFor(logging.DEBUG):
                self._log_overlaps(path, index)
            log.debug("Confirmed %s: %s (%s)", rule.kind.label, path, ", ".join(evidence))
            return Candidate(path=path, kind=rule.kind, confidence=Confidence.CONFIRMED, signals=evidence)

        return Candidate.rejected(path)

    def _log_overlaps(self, path: Path, winner: int) -> None:
        for rule in self._rules[winner + 1:]:
            if rule.evaluate(path)[0]:
                log.debug(
                    "%s also matches %s; keeping %s by priority",
                    path,
                    rule.kind.label,
                    self._rules[winner].kind.label,
                )
