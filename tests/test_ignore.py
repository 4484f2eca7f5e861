"""Tests for .wd40ignore parsing and matching."""

from __future__ import annotations

import logging

import pytest

from wd40.core.ignore import IgnorePattern, IgnoreRuleset, IgnoreStack, parse_ignore_lines


def matches(pattern: str, relative: str, is_dir: bool = True) -> bool:
    return IgnorePattern.compile(pattern).matches(relative, is_dir)


class TestParse:
    def test_comments_and_blanks(self):
        lines = ["# top comment", "", "   ", "  vendor/  ", "build  # generated", "!keep"]
        assert parse_ignore_lines(lines) == ["vendor/", "build", "!keep"]

    def test_hash_inside_pattern_kept(self):
        assert parse_ignore_lines(["issue#12"]) == ["issue#12"]


class TestPattern:
    def test_unanchored_matches_any_depth(self):
        assert matches("vendor", "vendor")
        assert matches("vendor", "a/b/vendor")
        assert not matches("vendor", "vendors")

    def test_leading_slash_anchors(self):
        assert matches("/vendor", "vendor")
        assert not matches("/vendor", "a/vendor")

    def test_inner_slash_anchors(self):
        assert matches("a/b", "a/b")
        assert not matches("a/b", "x/a/b")

    def test_star_stays_in_segment(self):
        assert matches("build-*", "build-1")
        assert matches("build-*", "x/build-1")
        assert not matches("build-*", "build-1/y")

    def test_question_mark(self):
        assert matches("v?", "v1")
        assert not matches("v?", "v12")

    def test_double_star_prefix(self):
        assert matches("**/fixtures", "fixtures")
        assert matches("**/fixtures", "a/b/fixtures")

    def test_double_star_suffix(self):
        assert matches("docs/**", "docs/a/b")
        assert not matches("docs/**", "other/docs/a")

    def test_double_star_middle(self):
        assert matches("a/**/b", "a/b")
        assert matches("a/**/b", "a/x/y/b")
        assert not matches("a/**/b", "a/x/c")

    def test_character_class(self):
        assert matches("[abc]x", "bx")
        assert not matches("[abc]x", "dx")
        assert matches("[!a]x", "bx")
        assert not matches("[!a]x", "ax")

    def test_escaped_metacharacter(self):
        assert matches(r"\*star", "*star")
        assert not matches(r"\*star", "xstar")

    def test_directory_only(self):
        assert matches("logs/", "logs", is_dir=True)
        assert not matches("logs/", "logs", is_dir=False)

    def test_negation_flag(self):
        pattern = IgnorePattern.compile("!keep")
        assert pattern.negated
        assert pattern.matches("keep")

    def test_malformed_never_matches(self, caplog):
        with caplog.at_level(logging.WARNING, logger="wd40.core.ignore"):
            pattern = IgnorePattern.compile("[abc")
        assert pattern.regex is None
        assert not pattern.matches("[abc")
        assert not pattern.matches("a")
        assert "malformed" in caplog.text


class TestRuleset:
    def test_last_match_wins(self, tree):
        ruleset = IgnoreRuleset.from_lines(tree, ["node_modules", "!keep/node_modules"])
        assert ruleset.match(tree / "x" / "node_modules") is True
        assert ruleset.match(tree / "keep" / "node_modules") is False
        assert ruleset.match(tree / "other") is None

    def test_outside_base_has_no_opinion(self, tree):
        ruleset = IgnoreRuleset.from_lines(tree / "sub", ["*"])
        assert ruleset.match(tree / "elsewhere") is None
        assert ruleset.match(tree / "sub") is None

    def test_below_ignored_directory(self, tree):
        ruleset = IgnoreRuleset.from_lines(tree, ["vendor/"])
        assert ruleset.match(tree / "vendor" / "deep" / "target") is True

    def test_from_file(self, tree):
        (tree / ".wd40ignore").write_text("# pinned\n/third_party\n")
        ruleset = IgnoreRuleset.from_file(tree / ".wd40ignore")
        assert ruleset.base == tree
        assert len(ruleset) == 1
        assert ruleset.match(tree / "third_party") is True

    def test_from_missing_file_raises(self, tree):
        with pytest.raises(OSError):
            IgnoreRuleset.from_file(tree / ".wd40ignore")


class TestStack:
    def test_closest_ruleset_wins(self, tree):
        stack = IgnoreStack()
        stack = stack.push(IgnoreRuleset.from_lines(tree, ["target"]))
        stack = stack.push(IgnoreRuleset.from_lines(tree / "sub", ["!target"]))
        assert not stack.is_ignored(tree / "sub" / "target")
        assert stack.is_ignored(tree / "other" / "target")

    def test_falls_through_to_outer_ruleset(self, tree):
        stack = IgnoreStack().push(IgnoreRuleset.from_lines(tree, ["*.bak"]))
        stack = stack.push(IgnoreRuleset.from_lines(tree / "sub", ["unrelated"]))
        assert stack.is_ignored(tree / "sub" / "old.bak")

    def test_push_empty_ruleset_is_noop(self, tree):
        stack = IgnoreStack()
        assert stack.push(IgnoreRuleset(base=tree)) is stack

    def test_push_does_not_mutate(self, tree):
        outer = IgnoreStack()
        outer.push(IgnoreRuleset.from_lines(tree, ["x"]))
        assert not outer.is_ignored(tree / "x")
