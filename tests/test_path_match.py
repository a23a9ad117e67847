from __future__ import annotations

import pytest

from prism.path_match import (
    extension_of,
    glob_to_regex,
    matches_any_extension,
    matches_any_path,
)


@pytest.mark.parametrize(
    ("glob", "path", "expected"),
    [
        ("src/**", "src/a/b/c.py", True),
        ("src/**", "srcx/a.py", False),
        ("*.md", "README.md", True),
        ("*.md", "docs/guide.md", False),
        ("**/*.md", "docs/guide.md", True),
        ("**/*.md", "README.md", False),
        ("docs/?.md", "docs/a.md", True),
        ("docs/?.md", "docs/ab.md", False),
        ("docs/?.md", "docs//.md", False),
        ("a.b", "axb", False),
        ("a+b(c)", "a+b(c)", True),
        (".github/workflows/**", ".github/workflows/ci.yml", True),
        (".github/workflows/**", "x/.github/workflows/ci.yml", False),
    ],
)
def test_glob_matching_is_anchored(glob: str, path: str, expected: bool) -> None:
    assert matches_any_path(path, [glob]) is expected


def test_glob_regex_is_cached() -> None:
    assert glob_to_regex("src/**") is glob_to_regex("src/**")


def test_backslashes_are_normalized() -> None:
    assert matches_any_path("docs\\guide.md", ["docs/*.md"])
    assert matches_any_path("docs/guide.md", ["docs\\*.md"])


def test_empty_or_missing_globs_never_match() -> None:
    assert not matches_any_path("src/a.py", [])
    assert not matches_any_path("src/a.py", None)


def test_extension_is_last_dot_onward_lowercased() -> None:
    assert extension_of("archive.tar.GZ") == ".gz"
    assert extension_of("Makefile") == ""
    assert extension_of(".env") == ".env"


def test_extension_match_ignores_case_on_both_sides() -> None:
    assert matches_any_extension("README.MD", [".md"])
    assert matches_any_extension("notes.md", [".MD"])
    assert not matches_any_extension("Makefile", [".md"])
    assert not matches_any_extension("notes.md", None)
