"""Rule for Haskell Stack work directories."""

from __future__ import annotations

from wd40.models.artifact import ArtifactKind
from wd40.models.options import ScanOptions
from wd40.models.rule import ValidationRule
from wd40.rules.probes import any_of, child, child_dir, project_markers, sibling, sibling_suffix


def stack_work_rule() -> ValidationRule:
    return ValidationRule(
        kind=ArtifactKind.STACK_WORK,
        names=frozenset({".stack-work"}),
        required=(
            any_of(child("stack.sqlite3"), child_dir("dist"), child_dir("install")),
            any_of(sibling("stack.yaml"), sibling("package.yaml"), sibling_suffix(".cabal")),
        ),
        vetoes=project_markers("Cargo.toml", "package.json", ".git", "setup.py"),
    )


def rules(options: ScanOptions) -> list[ValidationRule]:
    return [stack_work_rule()]
