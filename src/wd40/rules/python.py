"""Rule for Python virtual environments."""

from __future__ import annotations

from wd40.models.artifact import ArtifactKind
from wd40.models.options import DEFAULT_VENV_NAMES, ScanOptions
from wd40.models.rule import ValidationRule
from wd40.rules.probes import any_of, child, child_dir, project_markers

ACTIVATION_SCRIPTS = ("bin/activate", "Scripts/activate", "Scripts/activate.bat")


def venv_rule(names: tuple[str, ...] = DEFAULT_VENV_NAMES) -> ValidationRule:
    """A conventionally named directory with ``pyvenv.cfg``, an activation script and a lib dir.

    The name check keeps ``python -m venv .`` run inside a project from
    turning the whole project into a candidate.
    """
    return ValidationRule(
        kind=ArtifactKind.PYTHON_VENV,
        names=frozenset(names),
        required=(
            child("pyvenv.cfg"),
            any_of(*(child(s) for s in ACTIVATION_SCRIPTS)),
            any_of(child_dir("lib"), child_dir("Lib")),
        ),
        vetoes=project_markers(".git"),
    )


def rules(options: ScanOptions) -> list[ValidationRule]:
    return [venv_rule(options.venv_names)]
