"""
Source file discovery for LFE applications.

Scans each configured source directory recursively for ``*.lfe`` files.
Files whose base name starts with ``.`` or ``_`` are skipped (editor
backups, private helpers). Directories are walked in sorted order so the
result is the same from one scan to the next.
"""

import logging
import os
import re
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from ..errors import MissingFirstFileError

logger = logging.getLogger(__name__)

SOURCE_EXT = ".lfe"
SOURCE_PATTERN = re.compile(r"^[^._].*\.lfe$")


class SourceScanner:
    """Discovers LFE sources under an application directory.

    Example:
        scanner = SourceScanner(app_dir, src_dirs=["src", "test"])
        sources = scanner.scan()
    """

    def __init__(
        self,
        app_dir: Path,
        src_dirs: Optional[Sequence[str]] = None,
        pattern: "re.Pattern[str]" = SOURCE_PATTERN,
    ):
        """Initialize source scanner.

        Args:
            app_dir: Application root directory
            src_dirs: Source directories relative to app_dir (default: ["src"])
            pattern: Regex a file's base name must match
        """
        self.app_dir = Path(app_dir)
        self.src_dirs = list(src_dirs) if src_dirs else ["src"]
        self.pattern = pattern

    def source_dirs(self) -> List[Path]:
        """Absolute source directories in configured order."""
        return [self.app_dir / d for d in self.src_dirs]

    def scan(self, more_sources: Iterable[Path] = ()) -> List[Path]:
        """Collect all matching files, then append extra sources.

        Args:
            more_sources: Caller-supplied sources appended after the scan

        Returns:
            Discovered source paths
        """
        found: List[Path] = []
        for src_dir in self.source_dirs():
            found.extend(find_files(src_dir, self.pattern))
        found.extend(Path(p) for p in more_sources)
        logger.debug(f"Discovered {len(found)} source files in {self.src_dirs}")
        return found


def find_files(directory: Path, pattern: "re.Pattern[str]" = SOURCE_PATTERN) -> List[Path]:
    """Recursively find files under directory whose base name matches pattern.

    A missing directory yields no files.
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.debug(f"Source directory {directory} does not exist, skipping")
        return []

    matches: List[Path] = []
    for root, dirs, files in os.walk(directory):
        dirs.sort()
        for name in sorted(files):
            if pattern.match(name):
                matches.append(Path(root) / name)
    return matches


def check_files(files: Sequence[Path], base_dir: Optional[Path] = None) -> List[Path]:
    """Ensure every file in a list is present.

    Relative paths are resolved against base_dir when given.

    Args:
        files: Files that must exist
        base_dir: Directory relative paths are resolved against

    Returns:
        The resolved file paths, in the given order

    Raises:
        MissingFirstFileError: On the first file that is not a regular file
    """
    checked: List[Path] = []
    for file in files:
        path = Path(file)
        if base_dir is not None and not path.is_absolute():
            path = base_dir / path
        if not path.is_file():
            raise MissingFirstFileError(file)
        checked.append(path)
    return checked
