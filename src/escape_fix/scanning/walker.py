"""Discovery of candidate text files in a documentation corpus."""

import fnmatch
import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence


DEFAULT_EXTENSIONS = (".md", ".markdown")

# Build output, caches and version control never hold source pages
DEFAULT_EXCLUDE_DIRS = (
    "_site",
    ".git",
    ".jekyll-cache",
    ".sass-cache",
    "node_modules",
    "vendor",
    "scripts",
)


class FileWalker:
    """Enumerates candidate files under a corpus root.

    Directories are pruned by name, files are filtered by extension and by
    glob patterns relative to the root.
    """

    def __init__(self, root, extensions: Sequence[str] = DEFAULT_EXTENSIONS,
                 exclude_dirs: Sequence[str] = DEFAULT_EXCLUDE_DIRS,
                 exclude_files: Optional[Sequence[str]] = None):
        self.root = Path(root)
        self.extensions = tuple(ext.lower() for ext in extensions)
        self.exclude_dirs = set(exclude_dirs)
        self.exclude_files = list(exclude_files or [])

    def walk(self) -> List[Path]:
        """Find all candidate files, sorted for a stable processing order.

        Returns:
            List[Path]: Absolute paths of the files found.
        """
        if not self.root.is_dir():
            return []

        found = set()
        for dirpath, dirnames, filenames in os.walk(self.root):
            # Prune in place so os.walk never descends into excluded trees
            dirnames[:] = sorted(d for d in dirnames if not self._should_skip_directory(d))
            for filename in filenames:
                file_path = Path(dirpath) / filename
                if self._is_candidate(file_path):
                    # Symlinked pages resolve to one path and are queued once
                    found.add(file_path.resolve())

        return sorted(found)

    def _should_skip_directory(self, dir_name: str) -> bool:
        return dir_name in self.exclude_dirs

    def _is_candidate(self, file_path: Path) -> bool:
        if file_path.suffix.lower() not in self.extensions:
            return False
        if not file_path.is_file():
            return False
        return not self._is_excluded(file_path)

    def _is_excluded(self, file_path: Path) -> bool:
        relative = file_path.relative_to(self.root).as_posix()
        return any(
            fnmatch.fnmatch(relative, pattern) or fnmatch.fnmatch(file_path.name, pattern)
            for pattern in self.exclude_files
        )


def find_candidate_files(root, extensions: Iterable[str] = DEFAULT_EXTENSIONS,
                         exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
                         exclude_files: Optional[Iterable[str]] = None) -> List[Path]:
    """Find candidate files under ``root``.

    Args:
        root: Corpus root directory.
        extensions: File suffixes to include (case-insensitive).
        exclude_dirs: Directory names pruned anywhere in the tree.
        exclude_files: Glob patterns matched against the root-relative path or the file name.

    Returns:
        List[Path]: Sorted absolute file paths.
    """
    walker = FileWalker(root, tuple(extensions), tuple(exclude_dirs), list(exclude_files or []))
    return walker.walk()
