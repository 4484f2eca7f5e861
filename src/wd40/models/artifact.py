"""Artifact kinds and classified candidates."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ArtifactKind(Enum):
    """Kinds of artifact directory wd40 knows how to recognise."""

    RUST_TARGET = "RustTarget"
    NODE_MODULES = "NodeModules"
    PYTHON_VENV = "PythonVenv"
    STACK_WORK = "StackWork"
    SCCACHE = "Sccache"
    RUSTUP_ROOT = "RustupRoot"
    NEXT_BUILD = "NextBuild"
    CARGO_NIX_CACHE = "CargoNixCache"
    NONE = "None"

    @property
    def label(self) -> str:
        """Stable identifier used in the audit log."""
        return self.value

    @property
    def display_name(self) -> str:
        """Human-readable plural noun, e.g. 'node_modules directories'."""
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES: dict[ArtifactKind, str] = {
    ArtifactKind.RUST_TARGET: "Rust target directories",
    ArtifactKind.NODE_MODULES: "node_modules directories",
    ArtifactKind.PYTHON_VENV: "Python virtual environments",
    ArtifactKind.STACK_WORK: "Stack work directories",
    ArtifactKind.SCCACHE: "sccache directories",
    ArtifactKind.RUSTUP_ROOT: "rustup directories",
    ArtifactKind.NEXT_BUILD: "Next.js build directories",
    ArtifactKind.CARGO_NIX_CACHE: "cargo-nix directories",
    ArtifactKind.NONE: "ordinary directories",
}


class Confidence(Enum):
    """Classifier verdict for a single directory."""

    CONFIRMED = "confirmed"
    REJECTED = "rejected"


@dataclass(frozen=True, slots=True)
class Candidate:
    """A directory together with the classifier's verdict on it.

    ``signals`` lists the evidence that produced the verdict, e.g.
    ``("name=target", "CACHEDIR.TAG")``.
    """

    path: Path
    kind: ArtifactKind
    confidence: Confidence
    signals: tuple[str, ...] = ()

    @property
    def confirmed(self) -> bool:
        return self.confidence is Confidence.CONFIRMED

    @classmethod
    def rejected(cls, path: Path, signals: tuple[str, ...] = ()) -> Candidate:
        """Build the verdict for a directory that matched no rule."""
        return cls(path=path, kind=ArtifactKind.NONE, confidence=Confidence.REJECTED, signals=signals)
