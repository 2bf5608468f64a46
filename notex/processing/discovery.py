"""Discovery of input notes."""

import os
from fnmatch import fnmatch
from pathlib import Path

from loguru import logger

from notex.domain.note import Note
from notex.exceptions import DiscoveryError


class NoteDiscovery:
    """Recursively collect readable, non-empty text notes from a directory."""

    def __init__(self, exclude_patterns: list[str] | None = None):
        """
        Initialize NoteDiscovery.

        Args:
            exclude_patterns: Glob patterns matched against both the full path
                and the bare file name; a match on either excludes the file
        """
        self.exclude_patterns = exclude_patterns or []

    def is_excluded(self, path: Path) -> bool:
        path_str = str(path)
        return any(
            fnmatch(path_str, pattern) or fnmatch(path.name, pattern)
            for pattern in self.exclude_patterns
        )

    def discover(self, folder: Path) -> list[Note]:
        """Walk ``folder`` and return its notes in a stable, sorted order.

        Symlinks are followed; hidden files, excluded files and files with only
        whitespace are skipped. Unreadable files are logged and skipped.

        Args:
            folder: Input directory

        Returns:
            Notes in discovery order
        """
        if not folder.is_dir():
            raise DiscoveryError(f"Input directory does not exist: {folder}")

        notes = []
        for file in self._walk_files(folder):
            if file.name.startswith("."):
                continue

            if self.is_excluded(file):
                logger.debug(f"Excluded: {file}")
                continue

            try:
                content = file.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Could not read {file}: {e}")
                continue

            if not content.strip():
                continue

            logger.debug(f"Discovered: {file}")
            notes.append(Note(path=file, content=content))

        return notes

    @staticmethod
    def _walk_files(folder: Path) -> list[Path]:
        files = []
        visited: set[Path] = set()

        for root, dirs, filenames in os.walk(folder, followlinks=True):
            real_root = Path(root).resolve()
            if real_root in visited:
                # Symlink loop back into an already walked directory
                dirs[:] = []
                continue
            visited.add(real_root)

            dirs.sort()
            for name in sorted(filenames):
                path = Path(root) / name
                if path.is_file():
                    files.append(path)

        return files
