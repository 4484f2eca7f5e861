"""Run configuration."""

from __future__ import annotations

from dataclasses import dataclass

from wd40.models.artifact import ArtifactKind

ALL_KINDS: frozenset[ArtifactKind] = frozenset(k for k in ArtifactKind if k is not ArtifactKind.NONE)

# Directory names accepted as Python virtual environments
DEFAULT_VENV_NAMES = ("venv", ".venv", "env", "ENV", "virtualenv", ".virtualenv")


@dataclass(frozen=True, slots=True)
class ScanOptions:
    """Knobs for a single scan/clean run.

    ``fan_out_depth`` is how deep the calling thread walks before handing
    each remaining subtree to a worker. ``orphaned_only`` narrows Rust
    target directories to those without a sibling ``Cargo.toml`` and
    leaves other kinds alone.
    """

    dry_run: bool = False
    kinds: frozenset[ArtifactKind] = ALL_KINDS
    max_depth: int | None = None
    workers: int = 4
    fan_out_depth: int = 1
    orphaned_only: bool = False
    sccache_names: tuple[str, ...] = (".sccache",)
    venv_names: tuple[str, ...] = DEFAULT_VENV_NAMES
