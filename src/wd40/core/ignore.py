"""``.wd40ignore`` glob matching.

Patterns follow the familiar gitignore shape:

* ``*`` and ``?`` match within one path segment, ``[...]`` is a class,
* ``**`` matches across segments (``**/x``, ``x/**``, ``a/**/b``),
* a trailing ``/`` restricts the pattern to directories,
* a pattern with a leading or inner ``/`` is anchored to the directory that
  holds the ignore file; otherwise it matches at any depth below it,
* ``!pattern`` re-includes; inside one file the last matching pattern wins,
* across files the closest ancestor file with a matching pattern wins.

Matching never raises. A pattern that cannot be compiled is logged and then
never matches.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

log = logging.getLogger(__name__)

IGNORE_FILE_NAME = ".wd40ignore"

_INLINE_COMMENT_RE = re.compile(r"\s+#.*$")


def parse_ignore_lines(lines: Iterable[str]) -> list[str]:
    """Strip comments and blank lines, returning raw patterns in file order."""
    patterns: list[str] = []
    for line in lines:
        text = line.strip()
        if not text or text.startswith("#"):
            continue
        text = _INLINE_COMMENT_RE.sub("", text)
        if text:
            patterns.append(text)
    return patterns


def _translate(pattern: str) -> str:
    """Translate a glob body (no leading ``!`` or trailing ``/``) to a regex."""
    out: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**", i):
                end = i + 2
                at_segment_start = i == 0 or pattern[i - 1] == "/"
                if at_segment_start and end < n and pattern[end] == "/":
                    out.append("(?:.*/)?")
                    i = end + 1
                else:
                    out.append(".*")
                    i = end
                continue
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "[":
            start = i + 2 if i + 1 < n and pattern[i + 1] in "!^" else i + 1
            close = pattern.find("]", start)
            if close == -1 or close == i + 1:
                raise ValueError("unterminated character class")
            body = pattern[i + 1:close]
            if body[0] in "!^":
                body = "^" + body[1:]
            out.append("[" + body.replace("\\", "\\\\") + "]")
            i = close
        elif c == "\\" and i + 1 < n:
            i += 1
            out.append(re.escape(pattern[i]))
        else:
            out.append(re.escape(c))
        i += 1
    return "".join(out)


@dataclass(frozen=True, slots=True)
class IgnorePattern:
    """One compiled line of an ignore file."""

    raw: str
    regex: re.Pattern[str] | None
    negated: bool = False
    dir_only: bool = False

    @classmethod
    def compile(cls, raw: str) -> IgnorePattern:
        text = raw
        negated = text.startswith("!")
        if negated:
            text = text[1:]
        dir_only = text.endswith("/")
        text = text.rstrip("/")
        anchored = "/" in text
        text = text.lstrip("/")

        regex: re.Pattern[str] | None = None
        if text:
            try:
                prefix = "" if anchored else "(?:.*/)?"
                regex = re.compile(prefix + _translate(text))
            except (ValueError, re.error) as exc:
                log.warning("Ignoring malformed pattern %r: %s", raw, exc)
        else:
            log.warning("Ignoring empty pattern %r", raw)
        return cls(raw=raw, regex=regex, negated=negated, dir_only=dir_only)

    def matches(self, relative: str, is_dir: bool = True) -> bool:
        if self.regex is None:
            return False
        if self.dir_only and not is_dir:
            return False
        return self.regex.fullmatch(relative) is not None


@dataclass(frozen=True, slots=True)
class IgnoreRuleset:
    """Patterns from one ignore file, scoped to ``base`` and its descendants."""

    base: Path
    patterns: tuple[IgnorePattern, ...] = ()

    @classmethod
    def from_lines(cls, base: Path, lines: Iterable[str]) -> IgnoreRuleset:
        return cls(base=base, patterns=tuple(IgnorePattern.compile(p) for p in parse_ignore_lines(lines)))

    @classmethod
    def from_file(cls, path: Path) -> IgnoreRuleset:
        """Load ``path``; the ruleset is scoped to the file's directory.

        Raises:
            OSError: the file exists but cannot be read.
        """
        text = path.read_text(encoding="utf-8", errors="replace")
        return cls.from_lines(path.parent, text.splitlines())

    def match(self, path: Path, is_dir: bool = True) -> bool | None:
        """Verdict for ``path``: True ignored, False re-included, None no opinion.

        A path below an ignored directory is ignored as well.
        """
        try:
            relative = path.relative_to(self.base).as_posix()
        except ValueError:
            return None
        if relative in ("", "."):
            return None

        parts = relative.split("/")
        for depth in range(1, len(parts)):
            if self._verdict("/".join(parts[:depth]), True):
                return True
        return self._verdict(relative, is_dir)

    def _verdict(self, relative: str, is_dir: bool) -> bool | None:
        verdict: bool | None = None
        for pattern in self.patterns:
            if pattern.matches(relative, is_dir):
                verdict = not pattern.negated
        return verdict

    def __len__(self) -> int:
        return len(self.patterns)


@dataclass(frozen=True, slots=True)
class IgnoreStack:
    """Rulesets inherited from the root down to the current directory."""

    rulesets: tuple[IgnoreRuleset, ...] = ()

    def push(self, ruleset: IgnoreRuleset) -> IgnoreStack:
        """Return a new stack with ``ruleset`` as the closest scope."""
        if not ruleset.patterns:
            return self
        return IgnoreStack(self.rulesets + (ruleset,))

    def is_ignored(self, path: Path, is_dir: bool = True) -> bool:
        """True when the closest ruleset with an opinion excludes ``path``."""
        for ruleset in reversed(self.rulesets):
            verdict = ruleset.match(path, is_dir)
            if verdict is not None:
                return verdict
        return False
