"""Rules for Rust build output and toolchain caches."""

from __future__ import annotations

from wd40.models.artifact import ArtifactKind, Candidate
from wd40.models.options import ScanOptions
from wd40.models.rule import ValidationRule
from wd40.rules.probes import any_of, child, child_dir, has_file, has_subdirectory, not_empty, project_markers

TARGET_NAMES = frozenset({"target", "target-ra"})  # target-ra: rust-analyzer's build dir


def target_rule() -> ValidationRule:
    """``target/`` with a Cargo marker. Marker-based, so orphaned targets qualify too."""
    return ValidationRule(
        kind=ArtifactKind.RUST_TARGET,
        names=TARGET_NAMES,
        required=(any_of(child("CACHEDIR.TAG"), child(".rustc_info.json")),),
        vetoes=project_markers("Cargo.toml"),
    )


def sccache_rule(names: tuple[str, ...] = (".sccache",)) -> ValidationRule:
    return ValidationRule(
        kind=ArtifactKind.SCCACHE,
        names=frozenset(names),
        required=(any_of(has_subdirectory(), has_file()),),
        vetoes=project_markers(),
    )


def rustup_rule() -> ValidationRule:
    return ValidationRule(
        kind=ArtifactKind.RUSTUP_ROOT,
        names=frozenset({".rustup"}),
        required=(
            any_of(
                child("settings.toml"),
                child_dir("toolchains"),
                child_dir("downloads"),
                child_dir("update-hashes"),
            ),
        ),
        vetoes=project_markers(),
    )


def cargo_nix_rule() -> ValidationRule:
    return ValidationRule(
        kind=ArtifactKind.CARGO_NIX_CACHE,
        names=frozenset({".cargo-nix"}),
        required=(not_empty(),),
        vetoes=project_markers(),
    )


def is_orphaned_target(candidate: Candidate) -> bool:
    """True for a Rust target directory whose parent has no ``Cargo.toml``."""
    if candidate.kind is not ArtifactKind.RUST_TARGET:
        return False
    return not (candidate.path.parent / "Cargo.toml").exists()


def rules(options: ScanOptions) -> list[ValidationRule]:
    return [target_rule(), sccache_rule(options.sccache_names), rustup_rule(), cargo_nix_rule()]
