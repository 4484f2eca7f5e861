"""Reusable signal probes.

Each builder returns a :class:`~wd40.models.rule.Signal` whose probe inspects
a candidate directory, its children or its parent for marker files.
Probes are read-only and never raise; an unreadable path is simply a
missing signal.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from wd40.models.rule import Signal

log = logging.getLogger(__name__)

PROJECT_MARKERS = ("Cargo.toml", "package.json", ".git")


def child(name: str) -> Signal:
    """Holds when ``<dir>/<name>`` exists (file or directory)."""

    def probe(path: Path) -> str | None:
        return name if (path / name).exists() else None

    return Signal(name, probe)


def child_dir(name: str) -> Signal:
    """Holds when ``<dir>/<name>`` is a directory."""

    def probe(path: Path) -> str | None:
        return f"{name}/" if (path / name).is_dir() else None

    return Signal(f"{name}/", probe)


def sibling(name: str) -> Signal:
    """Holds when the parent directory contains ``name``."""

    def probe(path: Path) -> str | None:
        return f"parent:{name}" if (path.parent / name).exists() else None

    return Signal(f"parent:{name}", probe)


def sibling_suffix(suffix: str) -> Signal:
    """Holds when the parent directory contains a file ending in ``suffix``."""

    def probe(path: Path) -> str | None:
        with os.scandir(path.parent) as it:
            for entry in it:
                if entry.name.endswith(suffix) and entry.is_file():
                    return f"parent:{entry.name}"
        return None

    return Signal(f"parent:*{suffix}", probe)


def has_subdirectory() -> Signal:
    """Holds when the directory has at least one real (non-symlink) subdirectory."""

    def probe(path: Path) -> str | None:
        with os.scandir(path) as it:
            for entry in it:
                if entry.is_dir(follow_symlinks=False):
                    return f"subdir:{entry.name}"
        return None

    return Signal("subdir", probe)


def has_file() -> Signal:
    """Holds when the directory directly contains a regular file."""

    def probe(path: Path) -> str | None:
        with os.scandir(path) as it:
            for entry in it:
                if entry.is_file(follow_symlinks=False):
                    return f"file:{entry.name}"
        return None

    return Signal("file", probe)


def not_empty() -> Signal:
    """Holds when the directory has any entry at all."""

    def probe(path: Path) -> str | None:
        with os.scandir(path) as it:
            for entry in it:
                return f"entry:{entry.name}"
        return None

    return Signal("non-empty", probe)


def sibling_package_depends_on(package: str) -> Signal:
    """Holds when the parent's ``package.json`` lists ``package`` as a dependency."""

    def probe(path: Path) -> str | None:
        manifest = path.parent / "package.json"
        if not manifest.is_file():
            return None
        try:
            data = json.loads(manifest.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            log.debug("Unparseable package.json: %s", manifest)
            return None
        if not isinstance(data, dict):
            return None
        for section in ("dependencies", "devDependencies", "peerDependencies"):
            deps = data.get(section)
            if isinstance(deps, dict) and package in deps:
                return f"parent:package.json[{package}]"
        return None

    return Signal(f"parent:package.json[{package}]", probe)


def any_of(*signals: Signal) -> Signal:
    """Holds when at least one of ``signals`` holds; reports the first match."""
    name = "|".join(s.name for s in signals)

    def probe(path: Path) -> str | None:
        for signal in signals:
            found = signal.check(path)
            if found is not None:
                return found
        return None

    return Signal(name, probe)


def project_markers(*names: str) -> tuple[Signal, ...]:
    """Vetoes: a directory containing these looks like a project, not an artifact."""
    return tuple(child(n) for n in (names or PROJECT_MARKERS))
