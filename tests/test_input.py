"""Tests for file discovery and reading."""

import asyncio
import logging
import os

from token_limit.input import (
    ContentProvider,
    FileContent,
    get_files_content,
    normalize_file_paths,
)


def write(path, content: str = "content") -> str:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return str(path)


class TestNormalizeFilePaths:
    """Tests for normalize_file_paths function."""

    def test_backslashes(self):
        """Test Windows separators become forward slashes."""
        assert normalize_file_paths(["docs\\a.md", "b.md"]) == ["docs/a.md", "b.md"]


class TestContentProvider:
    """Tests for ContentProvider class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.provider = ContentProvider()

    def test_reads_matching_files_sorted(self, tmp_path):
        """Test matches are read in sorted path order."""
        write(tmp_path / "b.md", "bravo")
        write(tmp_path / "a.md", "alpha")
        write(tmp_path / "c.txt", "charlie")

        files = asyncio.run(self.provider.get_files_content(str(tmp_path / "*.md")))

        assert files == [
            FileContent(file_path=str(tmp_path / "a.md"), content="alpha"),
            FileContent(file_path=str(tmp_path / "b.md"), content="bravo"),
        ]

    def test_recursive_and_hidden(self, tmp_path):
        """Test ** recurses and hidden files are included."""
        write(tmp_path / "docs" / "deep" / "x.md")
        write(tmp_path / ".context" / "y.md")

        paths = self.provider.expand_patterns(str(tmp_path / "**" / "*.md"))

        assert paths == sorted(
            [str(tmp_path / ".context" / "y.md"), str(tmp_path / "docs" / "deep" / "x.md")]
        )

    def test_negated_patterns_exclude(self, tmp_path):
        """Test patterns starting with ! remove matches."""
        write(tmp_path / "keep.md")
        write(tmp_path / "skip.md")

        paths = self.provider.expand_patterns(
            [str(tmp_path / "*.md"), "!" + str(tmp_path / "skip.md")]
        )

        assert paths == [str(tmp_path / "keep.md")]

    def test_duplicates_removed(self, tmp_path):
        """Test overlapping patterns yield each file once."""
        write(tmp_path / "a.md")

        paths = self.provider.expand_patterns(
            [str(tmp_path / "*.md"), str(tmp_path / "a.md")]
        )

        assert paths == [str(tmp_path / "a.md")]

    def test_blank_patterns_ignored(self):
        """Test empty and whitespace patterns match nothing."""
        assert self.provider.expand_patterns(["", "   "]) == []
        assert self.provider.expand_patterns(None) == []

    def test_relative_patterns_become_absolute(self, tmp_path, monkeypatch):
        """Test relative patterns resolve against the working directory."""
        write(tmp_path / "a.md")
        monkeypatch.chdir(tmp_path)

        assert self.provider.expand_patterns("a.md") == [str(tmp_path / "a.md")]

    def test_no_matches(self, tmp_path):
        """Test no matching files gives an empty list."""
        assert asyncio.run(self.provider.get_files_content(str(tmp_path / "missing-*.md"))) == []

    def test_directories_skipped(self, tmp_path):
        """Test directories matched by a glob are not read."""
        (tmp_path / "folder.md").mkdir()
        write(tmp_path / "file.md", "text")

        files = asyncio.run(self.provider.get_files_content(str(tmp_path / "*.md")))

        assert [f.content for f in files] == ["text"]

    def test_large_files_skipped(self, tmp_path, caplog):
        """Test files above the size limit are skipped with a warning."""
        provider = ContentProvider(max_file_size=10)
        write(tmp_path / "big.md", "x" * 11)
        write(tmp_path / "small.md", "x" * 10)

        with caplog.at_level(logging.WARNING, logger="token_limit.input"):
            files = asyncio.run(provider.get_files_content(str(tmp_path / "*.md")))

        assert [os.path.basename(f.file_path) for f in files] == ["small.md"]
        assert "Skipping large file" in caplog.text

    def test_undecodable_file_omitted(self, tmp_path, caplog):
        """Test files that are not UTF-8 are logged and left out."""
        (tmp_path / "binary.md").write_bytes(b"\xff\xfe\x00\x80")
        write(tmp_path / "text.md", "ok")

        with caplog.at_level(logging.ERROR, logger="token_limit.input"):
            files = asyncio.run(self.provider.get_files_content(str(tmp_path / "*.md")))

        assert [f.content for f in files] == ["ok"]
        assert "Error reading file" in caplog.text

    def test_convenience_function(self, tmp_path):
        """Test the module level get_files_content function."""
        write(tmp_path / "a.md", "alpha")

        files = asyncio.run(get_files_content([str(tmp_path / "a.md")]))

        assert [f.content for f in files] == ["alpha"]
