"""File discovery and reading for token limit checks."""

import asyncio
import glob
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Set, Union

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024


@dataclass
class FileContent:
    """Text content of a single file."""

    file_path: str  # absolute
    content: str


def normalize_file_paths(paths: Sequence[str]) -> List[str]:
    """Convert Windows backslashes to forward slashes for glob patterns."""
    return [path.replace("\\", "/") for path in paths]


class ContentProvider:
    """Expands glob patterns and reads the matching files."""

    def __init__(self, max_file_size: int = MAX_FILE_SIZE_BYTES):
        self.max_file_size = max_file_size

    async def get_files_content(
        self, patterns: Union[str, Sequence[str], None]
    ) -> List[FileContent]:
        """Read all files matching the given glob patterns.

        Patterns starting with "!" exclude matches. Files are returned in
        sorted path order. Unreadable or oversized files are logged and left
        out instead of failing the whole call.

        Args:
            patterns: One pattern or a list of patterns; "**" recurses

        Returns:
            FileContent for every file that could be read
        """
        file_paths = await asyncio.to_thread(self.expand_patterns, patterns)

        results = await asyncio.gather(
            *(asyncio.to_thread(self._read_file, path) for path in file_paths),
            return_exceptions=True,
        )

        contents = []
        for path, result in zip(file_paths, results):
            if isinstance(result, BaseException):
                logger.error("Error reading file %s: %s", path, result)
            elif result is not None:
                contents.append(result)
        return contents

    def expand_patterns(self, patterns: Union[str, Sequence[str], None]) -> List[str]:
        """Resolve glob patterns to a sorted list of unique absolute paths."""
        if not patterns:
            return []

        pattern_list = [patterns] if isinstance(patterns, str) else list(patterns)
        valid = [
            p.strip().replace("\\", "/")
            for p in pattern_list
            if isinstance(p, str) and p.strip()
        ]

        included: Set[str] = set()
        excluded: Set[str] = set()
        for pattern in valid:
            if pattern.startswith("!"):
                excluded.update(self._glob(pattern[1:]))
            else:
                included.update(self._glob(pattern))

        return sorted(included - excluded)

    def _glob(self, pattern: str) -> List[str]:
        try:
            matches = glob.glob(pattern, recursive=True, include_hidden=True)
        except (OSError, ValueError) as e:
            logger.error('Error processing glob pattern "%s": %s', pattern, e)
            return []
        return [os.path.normpath(os.path.abspath(match)) for match in matches]

    def _read_file(self, file_path: str) -> Optional[FileContent]:
        """Read one file as UTF-8, skipping directories and large files.

        Raises:
            OSError: If the file cannot be read
            UnicodeDecodeError: If the file is not valid UTF-8
        """
        path = Path(file_path)
        if not path.is_file():
            logger.debug("Skipping non-file path: %s", file_path)
            return None

        size = path.stat().st_size
        if size > self.max_file_size:
            logger.warning(
                "Skipping large file (%dMB): %s",
                round(size / 1024 / 1024),
                file_path,
            )
            return None

        return FileContent(file_path=file_path, content=path.read_text(encoding="utf-8"))


async def get_files_content(
    patterns: Union[str, Sequence[str], None],
) -> List[FileContent]:
    """Read all files matching the given glob patterns.

    This is a convenience function that creates a ContentProvider instance
    and calls the get_files_content method.
    """
    provider = ContentProvider()
    return await provider.get_files_content(patterns)
