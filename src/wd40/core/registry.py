"""Central validation rule registry."""

from __future__ import annotations

import logging
from typing import Iterator

from wd40.models.artifact import ArtifactKind
from wd40.models.rule import ValidationRule

log = logging.getLogger(__name__)

# Most specific / least ambiguous first. pyvenv.cfg is definitive, while
# CACHEDIR.TAG (RustTarget) and "any content" (Sccache) are the weakest.
PRIORITY: tuple[ArtifactKind, ...] = (
    ArtifactKind.PYTHON_VENV,
    ArtifactKind.RUSTUP_ROOT,
    ArtifactKind.STACK_WORK,
    ArtifactKind.CARGO_NIX_CACHE,
    ArtifactKind.NEXT_BUILD,
    ArtifactKind.NODE_MODULES,
    ArtifactKind.RUST_TARGET,
    ArtifactKind.SCCACHE,
)


class RuleRegistry:
    """Holds one validation rule per artifact kind, iterated in priority order."""

    def __init__(self) -> None:
        self._rules: dict[ArtifactKind, ValidationRule] = {}

    def register(self, rule: ValidationRule) -> None:
        """Register a rule. A second rule for the same kind is ignored."""
        if rule.kind is ArtifactKind.NONE:
            raise ValueError("Cannot register a rule for ArtifactKind.NONE")
        if rule.kind in self._rules:
            log.warning("Rule for '%s' already registered, skipping duplicate", rule.kind.label)
            return
        self._rules[rule.kind] = rule
        log.debug("Registered rule: %s", rule.kind.label)

    def ordered(self) -> list[ValidationRule]:
        """All rules, highest priority first."""
        return [self._rules[k] for k in PRIORITY if k in self._rules]

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[ValidationRule]:
        return iter(self.ordered())

    def __contains__(self, kind: ArtifactKind) -> bool:
        return kind in self._rules
