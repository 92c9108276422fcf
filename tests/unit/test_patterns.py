"""Tests for glob pattern compilation, matching and enumeration."""

import os

import pytest

from bidi_detector.core.patterns import PathEntry, compile_pattern
from bidi_detector.utils.errors import ErrorCode, PatternError, SelectionError


def _paths(pattern, root):
    return [
        item.path for item in compile_pattern(pattern).iter_paths(str(root))
        if isinstance(item, PathEntry)
    ]


class TestCompile:
    @pytest.mark.parametrize(
        "pattern",
        ["**/*", "*.py", "src/*", "**/.git/*", "a/**/b", "[abc].txt", "[!x]*", "[]]", "?"],
    )
    def test_valid_patterns(self, pattern):
        assert compile_pattern(pattern).pattern == pattern

    @pytest.mark.parametrize(
        "pattern,reason",
        [
            ("", "non-empty"),
            ("[abc", "unclosed"),
            ("src/[", "unclosed"),
            ("a**/b", "single path component"),
            ("**b", "single path component"),
            ("***", "single path component"),
            ("[!]", "unclosed"),
        ],
    )
    def test_malformed_patterns(self, pattern, reason):
        with pytest.raises(PatternError) as exc_info:
            compile_pattern(pattern)
        assert reason in str(exc_info.value)
        assert exc_info.value.code is ErrorCode.E201_INVALID_PATTERN
        assert exc_info.value.fatal is True


class TestMatches:
    @pytest.mark.parametrize(
        "pattern,path,expected",
        [
            ("*.py", "main.py", True),
            ("*.py", "main.pyc", False),
            # '*' crosses separators when matching whole path strings
            ("*.py", "pkg/main.py", True),
            ("**/*.jpg", "photo.jpg", True),
            ("**/*.jpg", "a/b/photo.jpg", True),
            ("**/*.jpg", "a/b/photo.png", False),
            ("**/.git/*", ".git/config", True),
            ("**/.git/*", "sub/.git/objects/ab/cdef", True),
            ("**/.git/*", "sub/.gitignore", False),
            ("src/**", "src/a/b.rs", True),
            ("?.txt", "a.txt", True),
            ("?.txt", "ab.txt", False),
            ("[ab].txt", "b.txt", True),
            ("[!ab].txt", "b.txt", False),
            ("[!ab].txt", "c.txt", True),
            ("[a-c]x", "bx", True),
            ("file.[ch]", "file.h", True),
            ("a+b(c).txt", "a+b(c).txt", True),
            ("/abs/*.py", "/abs/x.py", True),
        ],
    )
    def test_matches(self, pattern, path, expected):
        assert compile_pattern(pattern).matches(path) is expected

    def test_reversed_range_matches_nothing(self):
        pattern = compile_pattern("[z-a]")
        assert not pattern.matches("a")
        assert not pattern.matches("z")


class TestIterPaths:
    def test_single_component_lists_direct_children(self, make_tree):
        root = make_tree({"a.py": "", "b.txt": "", "pkg/c.py": ""})
        assert _paths("*.py", root) == ["a.py"]

    def test_directory_prefix(self, make_tree):
        root = make_tree({"src/lib.rs": "", "src/main.rs": "", "src/nested/x.rs": "", "y.rs": ""})
        assert _paths("src/*", root) == ["src/lib.rs", "src/main.rs", "src/nested"]

    def test_recursive_wildcard(self, make_tree):
        root = make_tree({"a.txt": "", "d/b.txt": "", "d/e/c.txt": ""})
        assert _paths("**/*.txt", root) == ["a.txt", "d/b.txt", "d/e/c.txt"]

    def test_hidden_entries_included(self, make_tree):
        root = make_tree({".hidden": "", ".git/config": "", "v.txt": ""})
        paths = _paths("**/*", root)
        assert ".hidden" in paths
        assert ".git/config" in paths

    def test_sorted_within_directory(self, make_tree):
        root = make_tree({"c": "", "a": "", "b": ""})
        assert _paths("*", root) == ["a", "b", "c"]

    def test_literal_path(self, make_tree):
        root = make_tree({"docs/readme.md": ""})
        assert _paths("docs/readme.md", root) == ["docs/readme.md"]
        assert _paths("docs/missing.md", root) == []

    def test_missing_base_directory_yields_nothing(self, tmp_path):
        assert _paths("nope/*", tmp_path) == []

    def test_trailing_recursive_wildcard(self, make_tree):
        root = make_tree({"src/a/b.rs": ""})
        assert _paths("src/**", root) == ["src/a", "src/a/b.rs"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_wildcard_descends_into_symlinked_directory(self, make_tree):
        root = make_tree({"pkg/a.txt": ""})
        os.symlink(root / "pkg", root / "link", target_is_directory=True)
        assert _paths("*/a.txt", root) == ["link/a.txt", "pkg/a.txt"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_recursive_wildcard_follows_symlinked_directory(self, make_tree):
        root = make_tree({"real/x.txt": ""})
        os.symlink(root / "real", root / "link", target_is_directory=True)
        assert _paths("**/*.txt", root) == ["link/x.txt", "real/x.txt"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_symlink_cycle_is_not_reentered(self, make_tree):
        root = make_tree({"real/x.txt": ""})
        os.symlink(root / "real", root / "real" / "loop", target_is_directory=True)
        assert _paths("**/*.txt", root) == ["real/x.txt"]
        assert _paths("real/**", root) == ["real/loop", "real/x.txt"]

    @pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="needs POSIX non-root")
    def test_unreadable_directory_yields_error(self, make_tree):
        root = make_tree({"locked/x.txt": "", "open/y.txt": ""})
        (root / "locked").chmod(0)
        try:
            items = list(compile_pattern("**/*.txt").iter_paths(str(root)))
        finally:
            (root / "locked").chmod(0o755)
        errors = [i for i in items if isinstance(i, SelectionError)]
        assert [e.path for e in errors] == ["locked"]
        assert errors[0].code is ErrorCode.E202_UNREADABLE_DIRECTORY
        assert [i.path for i in items if isinstance(i, PathEntry)] == ["open/y.txt"]
