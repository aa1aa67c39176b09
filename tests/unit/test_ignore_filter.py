"""Tests for IgnoreFilter rule compilation and matching."""

import logging
from pathlib import Path
from unittest.mock import patch

from dirscout.core.ignore_filter import (
    IgnoreFilter,
    expand_directory_pattern,
    read_ignore_file,
)


def test_expand_directory_pattern_matches_any_depth():
    assert expand_directory_pattern("node_modules") == "**/node_modules/"
    assert expand_directory_pattern("target/dependency/") == "**/target/dependency/"


def test_default_dirs_match_directories_not_files():
    ignore_filter = IgnoreFilter.from_defaults(["node_modules", "dist"])

    assert ignore_filter.ignores("node_modules", is_dir=True)
    assert ignore_filter.ignores("dist", is_dir=True)
    # A plain file with the same name is not a directory match
    assert not ignore_filter.ignores("dist", is_dir=False)
    assert not ignore_filter.ignores("src", is_dir=True)


def test_hidden_directory_catch_all():
    ignore_filter = IgnoreFilter.from_defaults([".*"])

    assert ignore_filter.ignores(".git", is_dir=True)
    assert ignore_filter.ignores(".venv", is_dir=True)
    assert not ignore_filter.ignores(".env", is_dir=False)
    assert not ignore_filter.ignores("a.b", is_dir=True)


def test_default_dirs_match_nested_root_relative_paths():
    ignore_filter = IgnoreFilter.from_defaults(["node_modules", "target/dependency"])

    assert ignore_filter.ignores("packages/web/node_modules", is_dir=True)
    assert ignore_filter.ignores("svc/target/dependency", is_dir=True)
    # Multi-segment rules cannot match a single segment
    assert not ignore_filter.ignores("dependency", is_dir=True)


def test_later_negation_re_includes():
    ignore_filter = IgnoreFilter(["*.log", "!keep.log"])

    assert ignore_filter.ignores("debug.log")
    assert not ignore_filter.ignores("keep.log")


def test_ignore_file_rules_are_appended_after_defaults(tmp_path):
    (tmp_path / ".gitignore").write_text("# build output\n\n*.tmp\n!important.tmp\n", encoding="utf-8")

    ignore_filter = IgnoreFilter.from_defaults(["node_modules"], tmp_path / ".gitignore")

    assert ignore_filter.patterns == ["**/node_modules/", "*.tmp", "!important.tmp"]
    assert ignore_filter.ignores("scratch.tmp")
    assert not ignore_filter.ignores("important.tmp")


def test_missing_ignore_file_adds_nothing(tmp_path):
    ignore_filter = IgnoreFilter.from_defaults(["node_modules"], tmp_path / ".gitignore")

    assert ignore_filter.pattern_count == 1


def test_empty_filter_ignores_nothing():
    ignore_filter = IgnoreFilter()

    assert not ignore_filter.ignores("anything", is_dir=True)
    assert not ignore_filter.ignores("anything.txt")


def test_empty_and_dot_paths_are_never_ignored():
    ignore_filter = IgnoreFilter(["*"])

    assert not ignore_filter.ignores("")
    assert not ignore_filter.ignores(".", is_dir=True)


def test_backslash_paths_are_normalized():
    ignore_filter = IgnoreFilter.from_defaults(["node_modules"])

    assert ignore_filter.ignores("web\\node_modules", is_dir=True)


def test_case_insensitive_matching():
    ignore_filter = IgnoreFilter(["**/Pods/"], case_sensitive=False)

    assert ignore_filter.ignores("pods", is_dir=True)
    assert ignore_filter.ignores("PODS", is_dir=True)


def test_case_sensitive_matching():
    ignore_filter = IgnoreFilter(["**/Pods/"], case_sensitive=True)

    assert ignore_filter.ignores("Pods", is_dir=True)
    assert not ignore_filter.ignores("pods", is_dir=True)


def test_add_is_chainable_and_skips_comments():
    ignore_filter = IgnoreFilter().add(["# comment", "", "  ", "*.pyc"])

    assert ignore_filter.patterns == ["*.pyc"]
    assert ignore_filter.ignores("mod.pyc")


def test_read_ignore_file_skips_blank_and_comment_lines(tmp_path):
    path = tmp_path / ".gitignore"
    path.write_text("a\n\n# b\n  \nc\n", encoding="utf-8")

    assert read_ignore_file(path) == ["a", "c"]


def test_read_ignore_file_keeps_escaped_trailing_space(tmp_path):
    path = tmp_path / ".gitignore"
    path.write_text("foo\\ \nbar   \n", encoding="utf-8")

    patterns = read_ignore_file(path)
    ignore_filter = IgnoreFilter(patterns)

    assert patterns == ["foo\\ ", "bar   "]
    assert ignore_filter.ignores("foo ")
    assert not ignore_filter.ignores("foo")
    assert ignore_filter.ignores("bar")


def test_unsearchable_root_does_not_raise(tmp_path, caplog):
    ignore_path = tmp_path / ".gitignore"

    with patch.object(Path, "is_file", side_effect=PermissionError("denied")):
        with caplog.at_level(logging.WARNING):
            ignore_filter = IgnoreFilter.from_defaults(["node_modules"], ignore_path)

    assert ignore_filter.patterns == ["**/node_modules/"]
    assert any("Cannot access" in r.message for r in caplog.records)


def test_read_ignore_file_missing_returns_empty(tmp_path):
    assert read_ignore_file(Path(tmp_path) / "absent") == []
