"""Shared test fixtures."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from wd40.core.classifier import Classifier
from wd40.core.rule_loader import build_registry
from wd40.settings import Settings

CACHEDIR_TAG = b"Signature: 8a477f597d28d172789f06886806bc55\n"


@pytest.fixture(autouse=True)
def isolate_xdg(tmp_path, monkeypatch):
    """Point config and cache dirs at a temp directory and reset the settings singleton."""
    config = tmp_path / "xdg" / "config"
    cache = tmp_path / "xdg" / "cache"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config))
    monkeypatch.setenv("XDG_CACHE_HOME", str(cache))
    monkeypatch.setattr(Settings, "_instance", None)
    return config, cache


@pytest.fixture
def tree(tmp_path):
    """Scan root, kept apart from the XDG dirs."""
    root = tmp_path / "tree"
    root.mkdir()
    return root.resolve()


@pytest.fixture
def classifier():
    return Classifier(build_registry())


def write(path: Path, data: bytes = b"x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


def du(path: Path) -> int:
    """Apparent size of the regular files below ``path``."""
    return sum(p.stat().st_size for p in path.rglob("*") if p.is_file() and not p.is_symlink())


def snapshot(root: Path) -> dict[str, tuple[bool, int]]:
    """Every path below ``root`` with its type and mtime."""
    state: dict[str, tuple[bool, int]] = {}
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames + filenames:
            p = Path(dirpath) / name
            st = p.lstat()
            state[str(p.relative_to(root))] = (p.is_dir(), st.st_mtime_ns)
    return state


def read_records(text: str) -> list[dict]:
    """Parse a JSON Lines audit log."""
    return [json.loads(line) for line in text.splitlines() if line.strip()]


class ArtifactFactory:
    """Builds realistic artifact directories under a project directory."""

    def rust_target(self, project: Path, *, manifest: bool = True, name: str = "target") -> Path:
        if manifest:
            write(project / "Cargo.toml", b'[package]\nname = "demo"\n')
        target = project / name
        write(target / "CACHEDIR.TAG", CACHEDIR_TAG)
        write(target / "debug" / "demo", b"\x7fELF" + b"\0" * 996)
        write(target / "debug" / "deps" / "demo-1a2b.d", b"d" * 120)
        return target

    def node_modules(self, project: Path, *, manifest: str | None = "package.json") -> Path:
        if manifest:
            write(project / manifest, b'{"name": "app", "dependencies": {"left-pad": "^1.3.0"}}')
        modules = project / "node_modules"
        (modules / ".bin").mkdir(parents=True)
        write(modules / "left-pad" / "index.js", b"module.exports = leftPad;\n" * 10)
        write(modules / "left-pad" / "package.json", b'{"name": "left-pad"}')
        return modules

    def venv(self, project: Path, name: str = ".venv", *, windows: bool = False) -> Path:
        venv = project / name
        write(venv / "pyvenv.cfg", b"home = /usr/bin\nversion = 3.12.1\n")
        if windows:
            write(venv / "Scripts" / "activate.bat", b"@echo off\n")
            write(venv / "Lib" / "site-packages" / "six.py", b"s" * 300)
        else:
            write(venv / "bin" / "activate", b"# source me\n")
            write(venv / "lib" / "python3.12" / "site-packages" / "six.py", b"s" * 300)
        return venv

    def stack_work(self, project: Path, *, marker: str = "stack.yaml") -> Path:
        write(project / marker, b"resolver: lts-21.0\n")
        work = project / ".stack-work"
        write(work / "dist" / "x86_64-linux" / "build" / "Main.o", b"o" * 400)
        return work

    def sccache(self, parent: Path, name: str = ".sccache") -> Path:
        cache = parent / name
        write(cache / "a" / "b" / "c1d2e3", b"c" * 256)
        return cache

    def rustup(self, home: Path) -> Path:
        rustup = home / ".rustup"
        write(rustup / "settings.toml", b'default_toolchain = "stable"\n')
        write(rustup / "toolchains" / "stable" / "bin" / "rustc", b"r" * 512)
        return rustup

    def next_build(self, project: Path, *, config: bool = True, depends: bool = True) -> Path:
        if config:
            write(project / "next.config.js", b"module.exports = {};\n")
        deps = {"next": "14.0.0", "react": "18.2.0"} if depends else {"react": "18.2.0"}
        write(project / "package.json", json.dumps({"name": "web", "dependencies": deps}).encode())
        build = project / ".next"
        write(build / "BUILD_ID", b"k3j4h5")
        write(build / "server" / "pages" / "index.js", b"p" * 200)
        return build

    def cargo_nix(self, project: Path) -> Path:
        cache = project / ".cargo-nix"
        write(cache / "registry.lock", b"l" * 64)
        return cache


@pytest.fixture
def artifacts():
    return ArtifactFactory()
