"""Validation rule definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from wd40.models.artifact import ArtifactKind

Probe = Callable[[Path], "str | None"]  # returns the evidence found, or None


@dataclass(frozen=True, slots=True)
class Signal:
    """One independent check against a candidate directory.

    The probe returns a short evidence string when the signal holds
    (e.g. ``"CACHEDIR.TAG"``) and ``None`` otherwise.
    """

    name: str
    probe: Probe

    def check(self, path: Path) -> str | None:
        try:
            return self.probe(path)
        except OSError:
            return None


@dataclass(frozen=True, slots=True)
class ValidationRule:
    """How to confirm one artifact kind.

    A directory is confirmed when its name is in ``names`` (or ``names`` is
    empty), every signal in ``required`` holds, and no signal in ``vetoes``
    holds.
    """

    kind: ArtifactKind
    names: frozenset[str] = field(default_factory=frozenset)
    required: tuple[Signal, ...] = ()
    vetoes: tuple[Signal, ...] = ()

    def evaluate(self, path: Path) -> tuple[bool, tuple[str, ...]]:
        """Check ``path`` against this rule.

        Returns:
            (confirmed, evidence) tuple. On rejection the evidence ends with
            the reason, e.g. ``"missing:CACHEDIR.TAG|.rustc_info.json"``.
        """
        evidence: list[str] = []
        if self.names:
            if path.name not in self.names:
                return False, ()
            evidence.append(f"name={path.name}")

        for signal in self.required:
            found = signal.check(path)
            if found is None:
                evidence.append(f"missing:{signal.name}")
                return False, tuple(evidence)
            evidence.append(found)

        for veto in self.vetoes:
            found = veto.check(path)
            if found is not None:
                evidence.append(f"veto:{found}")
                return False, tuple(evidence)

        return True, tuple(evidence)
