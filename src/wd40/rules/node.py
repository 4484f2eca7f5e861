"""Rules for Node.js dependency trees and Next.js build output."""

from __future__ import annotations

from wd40.models.artifact import ArtifactKind
from wd40.models.options import ScanOptions
from wd40.models.rule import ValidationRule
from wd40.rules.probes import (
    any_of,
    child,
    child_dir,
    has_subdirectory,
    project_markers,
    sibling,
    sibling_package_depends_on,
)

NODE_MANIFESTS = ("package.json", "package-lock.json", "yarn.lock", "pnpm-lock.yaml")
NEXT_CONFIGS = ("next.config.js", "next.config.mjs", "next.config.ts")


def node_modules_rule() -> ValidationRule:
    """``node_modules/`` next to a manifest or lockfile, with installed packages inside."""
    return ValidationRule(
        kind=ArtifactKind.NODE_MODULES,
        names=frozenset({"node_modules"}),
        required=(
            any_of(*(sibling(m) for m in NODE_MANIFESTS)),
            any_of(child_dir(".bin"), child(".package-lock.json"), has_subdirectory()),
        ),
        vetoes=project_markers("Cargo.toml", "setup.py"),
    )


def next_build_rule() -> ValidationRule:
    """``.next/`` build output inside a Next.js project."""
    return ValidationRule(
        kind=ArtifactKind.NEXT_BUILD,
        names=frozenset({".next"}),
        required=(
            any_of(child("BUILD_ID"), child_dir("cache"), child_dir("server"), child_dir("static")),
            any_of(*(sibling(c) for c in NEXT_CONFIGS), sibling_package_depends_on("next")),
        ),
        vetoes=project_markers(),
    )


def rules(options: ScanOptions) -> list[ValidationRule]:
    return [node_modules_rule(), next_build_rule()]
