"""CLI interface for wd40."""

from __future__ import annotations

import dataclasses
import logging
import sys
import time
from pathlib import Path

import click

from wd40 import __version__
from wd40.core.engine import CleanEngine
from wd40.core.reporter import AuditReporter, summary_lines
from wd40.core.rule_loader import build_registry
from wd40.errors import ScanError
from wd40.models.artifact import ArtifactKind
from wd40.models.clean_result import CleanOutcome, CleanState
from wd40.models.options import ALL_KINDS, ScanOptions
from wd40.models.scan_result import ScanResult
from wd40.settings import Settings
from wd40.storage import open_audit_log
from wd40.utils import bytes_to_human, format_elapsed

# --*-only flag -> kinds it selects
_ONLY_FLAGS: dict[str, frozenset[ArtifactKind]] = {
    "rust_only": frozenset({ArtifactKind.RUST_TARGET}),
    "orphaned_only": frozenset({ArtifactKind.RUST_TARGET}),
    "node_only": frozenset({ArtifactKind.NODE_MODULES}),
    "python_only": frozenset({ArtifactKind.PYTHON_VENV}),
    "haskell_only": frozenset({ArtifactKind.STACK_WORK}),
    "rustup_only": frozenset({ArtifactKind.RUSTUP_ROOT}),
    "next_only": frozenset({ArtifactKind.NEXT_BUILD}),
    "cargo_nix_only": frozenset({ArtifactKind.CARGO_NIX_CACHE}),
}


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _selected_kinds(flags: dict[str, bool]) -> frozenset[ArtifactKind]:
    selected = frozenset().union(*(kinds for name, kinds in _ONLY_FLAGS.items() if flags.get(name)))
    return selected or ALL_KINDS


def _build_options(
    settings: Settings,
    *,
    dry_run: bool,
    kinds: frozenset[ArtifactKind],
    orphaned_only: bool,
    max_depth: int | None,
    jobs: int | None,
) -> ScanOptions:
    options = ScanOptions(dry_run=dry_run, kinds=kinds, orphaned_only=orphaned_only, **settings.scan_defaults())
    overrides: dict[str, int] = {}
    if max_depth is not None:
        overrides["max_depth"] = max_depth
    if jobs is not None:
        overrides["workers"] = jobs
    return dataclasses.replace(options, **overrides)


def _print_found(scan: ScanResult, verbose: int) -> None:
    by_kind: dict[ArtifactKind, list[Path]] = {}
    for candidate in scan.candidates:
        by_kind.setdefault(candidate.kind, []).append(candidate.path)

    for kind in ArtifactKind:
        paths = by_kind.get(kind)
        if not paths:
            continue
        click.echo(f"{click.style('Found', fg='green')} {len(paths):,} {kind.display_name}")
        if verbose:
            for path in paths:
                click.echo(f"  {path}")

    if scan.issues:
        click.echo(
            f"{click.style('!', fg='yellow')} {len(scan.issues)} director"
            f"{'y' if len(scan.issues) == 1 else 'ies'} could not be read"
        )


def _print_outcome(outcome: CleanOutcome) -> None:
    path = outcome.candidate.path
    size = bytes_to_human(outcome.size_bytes)
    match outcome.state:
        case CleanState.DRY_RUN_SKIPPED:
            click.echo(f"  {click.style('[DRY RUN]', fg='yellow')} {path} ({size})")
        case CleanState.DELETED:
            click.echo(f"  {click.style('✓', fg='green')} {path} ({size})")
        case CleanState.DELETE_FAILED:
            click.echo(f"  {click.style('✗', fg='red')} {path}: {outcome.error}")
        case CleanState.SKIPPED:
            click.echo(f"  {click.style('[SKIPPED]', fg='yellow')} {path}")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("path", default=".", type=click.Path(path_type=Path))
@click.option("--dry-run", "-n", is_flag=True, help="Show what would be cleaned without deleting anything")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.option("--rust-only", is_flag=True, help="Only Rust target directories")
@click.option("--orphaned-only", is_flag=True, help="Only Rust target directories without a sibling Cargo.toml")
@click.option("--node-only", is_flag=True, help="Only node_modules directories")
@click.option("--python-only", is_flag=True, help="Only Python virtual environments")
@click.option("--haskell-only", is_flag=True, help="Only Haskell Stack work directories")
@click.option("--rustup-only", is_flag=True, help="Only rustup toolchain directories")
@click.option("--next-only", is_flag=True, help="Only Next.js build directories")
@click.option("--cargo-nix-only", is_flag=True, help="Only cargo-nix cache directories")
@click.option("--max-depth", type=click.IntRange(min=0), default=None, help="Do not descend deeper than this")
@click.option("--jobs", "-j", type=click.IntRange(min=1), default=None, help="Worker threads")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Audit log path (default: ~/.cache/wd-40/clean-<timestamp>.log)",
)
@click.option("--no-log", is_flag=True, help="Do not write an audit log")
@click.version_option(__version__, prog_name="wd40")
def main(
    path: Path,
    dry_run: bool,
    verbose: int,
    yes: bool,
    max_depth: int | None,
    jobs: int | None,
    log_file: Path | None,
    no_log: bool,
    **only_flags: bool,
) -> None:
    """WD-40: find and remove build artifacts (target/, node_modules/, venvs, ...)."""
    _setup_logging(verbose)

    options = _build_options(
        Settings.instance(),
        dry_run=dry_run,
        kinds=_selected_kinds(only_flags),
        orphaned_only=only_flags.get("orphaned_only", False),
        max_depth=max_depth,
        jobs=jobs,
    )
    engine = CleanEngine(build_registry(options), options)

    click.echo(click.style("🛢️  WD-40 - Project Artifact Cleaner", fg="cyan", bold=True))
    click.echo()

    # ── scan ────────────────────────────────────────────────────────────

    started = time.monotonic()
    try:
        scan = engine.scan(path)
    except ScanError as exc:
        click.echo(f"{click.style('Error:', fg='red', bold=True)} {exc}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nInterrupted.")
        sys.exit(130)

    if verbose:
        click.echo(f"Scanned {scan.root} in {format_elapsed(time.monotonic() - started)}")

    if scan.candidates or scan.issues:
        _print_found(scan, verbose)
    else:
        click.echo(click.style("No artifacts found.", fg="yellow"))

    # ── confirm ─────────────────────────────────────────────────────────

    if scan.candidates and not (yes or dry_run):
        click.echo()
        if not click.confirm(f"Delete {len(scan.candidates):,} directories?", default=False):
            click.echo("Aborted.")
            return

    # ── clean ───────────────────────────────────────────────────────────

    log_path: Path | None = None
    sink = None
    if not no_log:
        try:
            log_path, sink = open_audit_log(log_file)
        except OSError as exc:
            click.echo(f"{click.style('!', fg='yellow')} Cannot write audit log: {exc}", err=True)

    click.echo()
    try:
        summary = engine.clean(scan, reporter=AuditReporter(sink), on_outcome=_print_outcome)
    finally:
        if sink is not None:
            sink.close()

    click.echo()
    for line in summary_lines(summary):
        click.echo(line)

    if scan.candidates:
        if dry_run:
            click.echo(
                f"\nWould free: {click.style(bytes_to_human(summary.total_bytes_found), fg='green', bold=True)}"
                " (dry run, nothing was deleted)"
            )
        else:
            click.echo(
                f"\nTotal freed: {click.style(bytes_to_human(summary.total_bytes_freed), fg='green', bold=True)}"
            )
    if log_path is not None:
        click.echo(f"Log: {log_path}")
