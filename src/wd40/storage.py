"""Audit log file locations."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import TextIO

from wd40.utils import xdg_cache_home

log = logging.getLogger(__name__)

_LOG_DIR_NAME = "wd-40"


def log_dir() -> Path:
    return xdg_cache_home() / _LOG_DIR_NAME


def default_log_path(now: datetime | None = None) -> Path:
    """Return ``<cache>/wd-40/clean-<YYYYmmdd-HHMMSS>.log`` for this run."""
    stamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    return log_dir() / f"clean-{stamp}.log"


def open_audit_log(path: Path | None = None) -> tuple[Path, TextIO]:
    """Create the log file (and its directory) and open it for appending.

    Raises:
        OSError: the log file cannot be created.
    """
    path = path or default_log_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    handle = open(path, "a", encoding="utf-8")
    log.debug("Audit log: %s", path)
    return path, handle
