"""
Tests for gitignore-style path rules.
"""

from modelrelay.core.context_assembler import DEFAULT_IGNORE_PATTERNS
from modelrelay.core.ignore_rules import IgnoreRules, compile_rule


def test_blank_lines_and_comments_are_skipped():
    rules = IgnoreRules(["# comment", "", "   ", "*.pyc"])
    assert len(rules) == 1
    assert rules.patterns == ["*.pyc"]
    assert compile_rule("# nope") is None


def test_unanchored_pattern_matches_at_any_depth():
    rules = IgnoreRules(["*.log"])
    assert rules.ignores("debug.log")
    assert rules.ignores("a/b/debug.log")
    assert not rules.ignores("debug.txt")


def test_slash_anchors_pattern_to_root():
    rules = IgnoreRules(["/TODO.md", "docs/*.tmp"])
    assert rules.ignores("TODO.md")
    assert not rules.ignores("sub/TODO.md")
    assert rules.ignores("docs/a.tmp")
    assert not rules.ignores("other/docs/a.tmp")


def test_directory_glob_ignores_contents():
    rules = IgnoreRules(["node_modules/**"])
    assert rules.ignores("node_modules/react/index.js")
    assert not rules.ignores("src/node_modules.txt")


def test_trailing_slash_is_directory_only():
    rules = IgnoreRules(["build/"])
    assert rules.ignores("build", is_dir=True)
    assert rules.ignores("build/out.js")
    assert rules.ignores("pkg/build/out.js")
    assert not rules.ignores("build")


def test_negation_reincludes_and_last_rule_wins():
    rules = IgnoreRules(["*.log", "!keep.log"])
    assert rules.ignores("drop.log")
    assert not rules.ignores("keep.log")
    assert not rules.ignores("nested/keep.log")


def test_cannot_reinclude_inside_ignored_directory():
    rules = IgnoreRules(["dist/", "!dist/keep.js"])
    assert rules.ignores("dist/keep.js")


def test_question_mark_and_character_class():
    rules = IgnoreRules(["file?.txt", "img[0-9].png"])
    assert rules.ignores("file1.txt")
    assert not rules.ignores("file10.txt")
    assert rules.ignores("img3.png")
    assert not rules.ignores("imgx.png")


def test_empty_brackets_are_literal():
    rules = IgnoreRules(["[]", "[!]"])
    assert len(rules) == 2
    assert rules.ignores("[]")
    assert rules.ignores("docs/[!]")
    assert not rules.ignores("a")


def test_leading_close_bracket_is_part_of_the_class():
    rules = IgnoreRules(["x[]y]", "n[!]]"])
    assert rules.ignores("x]")
    assert rules.ignores("xy")
    assert not rules.ignores("xz")
    assert rules.ignores("na")
    assert not rules.ignores("n]")


def test_invalid_range_is_skipped(caplog):
    rules = IgnoreRules(["[z-a]", "*.tmp"])
    assert rules.patterns == ["*.tmp"]
    assert rules.ignores("x.tmp")
    assert "[z-a]" in caplog.text


def test_double_star_in_middle():
    rules = IgnoreRules(["a/**/z.txt"])
    assert rules.ignores("a/z.txt")
    assert rules.ignores("a/b/c/z.txt")
    assert not rules.ignores("b/z.txt")


def test_default_patterns():
    rules = IgnoreRules(DEFAULT_IGNORE_PATTERNS)
    assert rules.ignores(".git/HEAD")
    assert rules.ignores("package-lock.json")
    assert rules.ignores("web/pnpm-lock.yml")
    assert rules.ignores("logs/yarn-error.log.1")
    assert rules.ignores("src/.DS_Store")
    assert not rules.ignores("src/index.ts")
    assert not rules.ignores("package.json")


def test_empty_rule_set_ignores_nothing():
    assert not IgnoreRules().ignores("anything/at/all.txt")
