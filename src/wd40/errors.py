"""Exception types."""

from __future__ import annotations

from pathlib import Path


class Wd40Error(Exception):
    """Base class for wd40 errors."""


class ScanError(Wd40Error):
    """The scan root cannot be used. The only fatal error."""


class DirectoryReadError(Wd40Error):
    """A directory below the root could not be listed."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"{path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause


class SizeProbeError(Wd40Error):
    """A file inside a candidate could not be stat'ed."""

    def __init__(self, path: Path | str, cause: OSError) -> None:
        super().__init__(f"{path}: {cause.strerror or cause}")
        self.path = Path(path)
        self.cause = cause


class DeleteFailed(Wd40Error):
    """A candidate could not be (fully) removed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
