"""Directory tree walker."""

from __future__ import annotations

import logging
import os
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator

from wd40.core.classifier import Classifier
from wd40.core.ignore import IGNORE_FILE_NAME, IgnoreRuleset, IgnoreStack
from wd40.errors import DirectoryReadError, ScanError
from wd40.models.artifact import ArtifactKind, Candidate
from wd40.models.options import ALL_KINDS
from wd40.models.scan_result import IssueKind, ScanIssue

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WalkNode:
    """A directory waiting to be visited, with the ignore rules above it."""

    path: Path
    depth: int = 0
    ignores: IgnoreStack = field(default_factory=IgnoreStack)


class TreeWalker:
    """Breadth-first walk that classifies directories and prunes artifacts.

    Each directory is visited at most once. A confirmed artifact is emitted
    (if its kind is selected) and never descended into; anything else has
    its child directories queued. Symlinked directories are not followed.
    Unreadable directories are recorded in :attr:`issues` and skipped.

    Args:
        classifier: Classifier consulted for every visited directory.
        kinds: Artifact kinds to emit. Confirmed directories of other kinds
            are still pruned, just not emitted.
        max_depth: Deepest level to visit (root is 0). None for unbounded.
        should_stop: Polled between directories; True ends the walk early.
    """

    def __init__(
        self,
        classifier: Classifier,
        *,
        kinds: frozenset[ArtifactKind] = ALL_KINDS,
        max_depth: int | None = None,
        should_stop: Callable[[], bool] | None = None,
    ) -> None:
        self._classifier = classifier
        self._kinds = kinds
        self._max_depth = max_depth
        self._should_stop = should_stop
        self._visited: set[str] = set()
        self.issues: list[ScanIssue] = []
        self.stopped = False

    def root_node(self, root: Path | str) -> WalkNode:
        """Validate ``root`` and return the node to start from.

        Raises:
            ScanError: the root does not exist, is not a directory or
                cannot be listed.
        """
        path = Path(root).expanduser().resolve()
        if not path.exists():
            raise ScanError(f"Path does not exist: {path}")
        if not path.is_dir():
            raise ScanError(f"Not a directory: {path}")
        try:
            with os.scandir(path):
                pass
        except OSError as exc:
            raise ScanError(f"Cannot read {path}: {exc.strerror or exc}") from exc
        return WalkNode(path=path)

    def walk(self, root: Path | str) -> Iterator[Candidate]:
        """Lazily yield confirmed candidates below ``root``."""
        self._visited.clear()
        self.issues.clear()
        self.stopped = False
        yield from self.walk_node(self.root_node(root))

    def walk_node(self, node: WalkNode) -> Iterator[Candidate]:
        """Lazily yield confirmed candidates in the subtree at ``node``."""
        queue: deque[WalkNode] = deque([node])
        while queue:
            if self._should_stop is not None and self._should_stop():
                log.info("Walk stopped early at %s", queue[0].path)
                self.stopped = True
                return
            candidate, children = self.visit(queue.popleft())
            if candidate is not None:
                yield candidate
            queue.extend(children)

    def split(self, node: WalkNode, depth: int) -> tuple[list[Candidate], list[WalkNode]]:
        """Walk breadth-first until ``depth`` levels below ``node``.

        Returns:
            (candidates, frontier): candidates found on the way, and the
            unvisited nodes at ``depth`` whose subtrees remain to be walked.
        """
        candidates: list[Candidate] = []
        frontier: list[WalkNode] = []
        queue: deque[WalkNode] = deque([node])
        while queue:
            current = queue.popleft()
            if current.depth - node.depth >= depth:
                frontier.append(current)
                continue
            candidate, children = self.visit(current)
            if candidate is not None:
                candidates.append(candidate)
            queue.extend(children)
        return candidates, frontier

    def visit(self, node: WalkNode) -> tuple[Candidate | None, list[WalkNode]]:
        """Process one directory.

        Returns:
            (candidate, children): the emitted candidate, if any, and the
            child nodes to visit next (empty when pruned).
        """
        key = os.fspath(node.path)
        if key in self._visited:
            return None, []
        self._visited.add(key)

        if node.ignores.is_ignored(node.path, is_dir=True):
            log.debug("Ignored by .wd40ignore: %s", node.path)
            return None, []

        ignores = self._load_ignore_file(node)

        if node.depth > 0:
            candidate = self._classifier.classify(node.path)
            if candidate.confirmed:
                if candidate.kind in self._kinds:
                    return candidate, []
                log.debug("Pruned unselected %s: %s", candidate.kind.label, node.path)
                return None, []

        if self._max_depth is not None and node.depth >= self._max_depth:
            return None, []

        try:
            children = self._list_child_dirs(node.path)
        except DirectoryReadError as exc:
            log.warning("Skipping unreadable directory %s", exc)
            self.issues.append(ScanIssue(exc.path, IssueKind.READ, str(exc.cause.strerror or exc.cause)))
            return None, []

        return None, [WalkNode(path=child, depth=node.depth + 1, ignores=ignores) for child in children]

    def _load_ignore_file(self, node: WalkNode) -> IgnoreStack:
        ignore_file = node.path / IGNORE_FILE_NAME
        if not ignore_file.is_file():
            return node.ignores
        try:
            ruleset = IgnoreRuleset.from_file(ignore_file)
        except OSError as exc:
            log.warning("Cannot read %s: %s", ignore_file, exc)
            self.issues.append(ScanIssue(ignore_file, IssueKind.IGNORE_FILE, str(exc.strerror or exc)))
            return node.ignores
        log.debug("Loaded %d ignore patterns from %s", len(ruleset), ignore_file)
        return node.ignores.push(ruleset)

    @staticmethod
    def _list_child_dirs(path: Path) -> list[Path]:
        """Real (non-symlink) subdirectories of ``path``, sorted by name."""
        children: list[Path] = []
        try:
            with os.scandir(path) as it:
                for entry in it:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            children.append(Path(entry.path))
                    except OSError:
                        log.debug("Cannot stat %s", entry.path)
        except OSError as exc:
            raise DirectoryReadError(path, exc) from exc
        children.sort()
        return children
