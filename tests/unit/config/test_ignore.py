"""Tests for exclusion patterns."""

from __future__ import annotations

from pathlib import Path

from stacksniff.config.ignore import (
    DEFAULT_EXCLUDE,
    IGNORE_FILE_NAME,
    ExcludePatterns,
    load_exclude_patterns,
)


class TestExcludePatterns:
    """Tests for ExcludePatterns."""

    def test_empty_matches_nothing(self, tmp_path: Path) -> None:
        patterns = ExcludePatterns([])
        assert not patterns
        assert not patterns.matches(tmp_path / "anything", tmp_path)

    def test_skips_comments_and_blanks(self) -> None:
        assert ExcludePatterns(["# comment", "", "  vendor/  "]).patterns == ["vendor/"]

    def test_directory_pattern(self, tmp_path: Path) -> None:
        (tmp_path / "vendor" / "lib").mkdir(parents=True)
        (tmp_path / "vendor" / "lib" / "Gemfile").write_text("")
        patterns = ExcludePatterns(["vendor/"])

        assert patterns.matches(tmp_path / "vendor", tmp_path)
        assert patterns.matches(tmp_path / "vendor" / "lib" / "Gemfile", tmp_path)
        assert not patterns.matches(tmp_path / "Gemfile", tmp_path)

    def test_relative_paths(self, tmp_path: Path) -> None:
        assert ExcludePatterns(["*.lock"]).matches(Path("yarn.lock"), tmp_path)

    def test_outside_root_is_not_excluded(self, tmp_path: Path) -> None:
        root = tmp_path / "root"
        root.mkdir()
        assert not ExcludePatterns(["*"]).matches(tmp_path / "other", root)

    def test_merge_allows_negation(self, tmp_path: Path) -> None:
        merged = ExcludePatterns.merge(ExcludePatterns(["*.txt"]), None, ExcludePatterns(["!keep.txt"]))

        assert merged.matches(Path("drop.txt"), tmp_path)
        assert not merged.matches(Path("keep.txt"), tmp_path)


class TestLoadExcludePatterns:
    """Tests for load_exclude_patterns."""

    def test_defaults(self, tmp_path: Path) -> None:
        assert load_exclude_patterns(tmp_path).patterns == DEFAULT_EXCLUDE

    def test_config_replaces_defaults(self, tmp_path: Path) -> None:
        assert load_exclude_patterns(tmp_path, ["build/"]).patterns == ["build/"]

    def test_ignore_file_is_appended(self, tmp_path: Path) -> None:
        (tmp_path / IGNORE_FILE_NAME).write_text("# generated\nfixtures/\n")

        patterns = load_exclude_patterns(tmp_path)

        assert patterns.patterns == [*DEFAULT_EXCLUDE, "fixtures/"]
