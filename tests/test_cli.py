"""Tests for the command-line interface."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from conftest import read_records
from wd40 import __version__
from wd40.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def projects(tree, artifacts):
    return {
        "target": artifacts.rust_target(tree / "rust"),
        "node_modules": artifacts.node_modules(tree / "web"),
        "venv": artifacts.venv(tree / "py"),
    }


class TestScan:
    def test_dry_run(self, runner, tree, projects, tmp_path):
        log_file = tmp_path / "audit.log"
        result = runner.invoke(main, [str(tree), "--dry-run", "--log-file", str(log_file)])

        assert result.exit_code == 0, result.output
        assert "Found 1 Rust target directories" in result.output
        assert "Found 1 node_modules directories" in result.output
        assert "[DRY RUN]" in result.output
        assert "Would free:" in result.output
        assert all(p.is_dir() for p in projects.values())

        records = read_records(log_file.read_text())
        assert records[0]["mode"] == "dry-run"
        assert records[-1]["event"] == "summary"

    def test_nothing_found(self, runner, tree, isolate_xdg):
        _, cache = isolate_xdg
        result = runner.invoke(main, [str(tree)])

        assert result.exit_code == 0, result.output
        assert "No artifacts found." in result.output
        assert "Total freed" not in result.output
        logs = list((cache / "wd-40").glob("clean-*.log"))
        assert len(logs) == 1
        assert f"Log: {logs[0]}" in result.output
        records = read_records(logs[0].read_text())
        assert [r["event"] for r in records] == ["run_start", "summary"]
        assert records[-1]["bytes_freed"] == 0

    def test_missing_path_exits_1(self, runner, tree):
        result = runner.invoke(main, [str(tree / "missing")])
        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestClean:
    def test_yes_deletes(self, runner, tree, projects):
        result = runner.invoke(main, [str(tree), "-y", "--no-log"])

        assert result.exit_code == 0, result.output
        assert "Total freed:" in result.output
        assert not any(p.exists() for p in projects.values())
        assert (tree / "rust" / "Cargo.toml").exists()

    def test_confirm_declined(self, runner, tree, projects):
        result = runner.invoke(main, [str(tree)], input="n\n")

        assert result.exit_code == 0
        assert "Aborted." in result.output
        assert all(p.is_dir() for p in projects.values())

    def test_confirm_accepted(self, runner, tree, projects):
        result = runner.invoke(main, [str(tree), "--no-log"], input="y\n")
        assert result.exit_code == 0, result.output
        assert not any(p.exists() for p in projects.values())

    def test_only_flag(self, runner, tree, projects):
        result = runner.invoke(main, [str(tree), "-y", "--node-only", "--no-log"])

        assert result.exit_code == 0, result.output
        assert not projects["node_modules"].exists()
        assert projects["target"].is_dir()
        assert projects["venv"].is_dir()

    def test_combined_only_flags(self, runner, tree, projects):
        result = runner.invoke(main, [str(tree), "-y", "--python-only", "--rust-only", "--no-log"])

        assert result.exit_code == 0, result.output
        assert not projects["venv"].exists()
        assert not projects["target"].exists()
        assert projects["node_modules"].is_dir()

    def test_orphaned_only(self, runner, tree, artifacts, projects):
        orphan = artifacts.rust_target(tree / "old", manifest=False)
        result = runner.invoke(main, [str(tree), "-y", "--orphaned-only", "--no-log"])

        assert result.exit_code == 0, result.output
        assert not orphan.exists()
        assert projects["target"].is_dir()

    def test_orphaned_only_with_other_kind(self, runner, tree, artifacts, projects):
        orphan = artifacts.rust_target(tree / "old", manifest=False)
        result = runner.invoke(main, [str(tree), "-y", "--orphaned-only", "--node-only", "--no-log"])

        assert result.exit_code == 0, result.output
        assert not orphan.exists()
        assert not projects["node_modules"].exists()
        assert projects["target"].is_dir()
        assert projects["venv"].is_dir()

    def test_default_log_location(self, runner, tree, projects, isolate_xdg):
        _, cache = isolate_xdg
        result = runner.invoke(main, [str(tree), "-y", "--jobs", "1"])

        assert result.exit_code == 0, result.output
        logs = list((cache / "wd-40").glob("clean-*.log"))
        assert len(logs) == 1
        assert f"Log: {logs[0]}" in result.output
        records = read_records(logs[0].read_text())
        assert sum(r["event"] == "candidate" for r in records) == 3
        assert {r["outcome"] for r in records if r["event"] == "candidate"} == {"deleted"}

    def test_no_log(self, runner, tree, projects, isolate_xdg):
        _, cache = isolate_xdg
        runner.invoke(main, [str(tree), "-y", "--no-log"])
        assert not (cache / "wd-40").exists()

    def test_max_depth(self, runner, tree, projects):
        result = runner.invoke(main, [str(tree), "-y", "--max-depth", "1", "--no-log"])
        assert result.exit_code == 0
        assert "No artifacts found." in result.output
        assert all(p.is_dir() for p in projects.values())

    def test_settings_file_is_used(self, runner, tree, artifacts, isolate_xdg):
        config, _ = isolate_xdg
        (config / "wd-40").mkdir(parents=True)
        (config / "wd-40" / "settings.json").write_text(json.dumps({"rules": {"sccache_names": ["ccache-dir"]}}))
        cache_dir = artifacts.sccache(tree, "ccache-dir")

        result = runner.invoke(main, [str(tree), "-y", "--no-log"])

        assert result.exit_code == 0, result.output
        assert not cache_dir.exists()
