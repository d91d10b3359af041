"""Gitignore-style pattern matching for source discovery."""

from pathlib import Path
from typing import Iterable

from pathspec import PathSpec
from pathspec.patterns import GitWildMatchPattern

from .constants import IGNORE_FILE, NSTRACK_DIR


# Default patterns to always ignore
DEFAULTS = [
    # Version control
    ".git/",
    ".hg/",

    # nstrack metadata
    f"{NSTRACK_DIR}/",

    # Clojure CLI and editor tooling caches
    ".cpcache/",
    ".lsp/",

    # Editor lock and backup files
    ".#*",
    "*~",
]


class IgnoreSpec:
    """Manages gitignore-style patterns for excluding paths under a source directory."""

    def __init__(self, root: Path, extra: Iterable[str] = ()):
        """Initialize ignore spec with default and custom patterns.

        Args:
            root: Source directory the patterns are relative to
            extra: Additional patterns to include
        """
        patterns = list(DEFAULTS)

        # Load directory-specific .nstrackignore if it exists
        ignore_file = root / IGNORE_FILE
        if ignore_file.is_file():
            for line in ignore_file.read_text().splitlines():
                line = line.strip()
                if line and not line.startswith("#"):
                    patterns.append(line)

        patterns.extend(extra)

        # Compile patterns once
        self.spec = PathSpec.from_lines(GitWildMatchPattern, patterns)

    def is_ignored(self, relpath: str) -> bool:
        """Check if a root-relative POSIX path should be ignored."""
        return self.spec.match_file(relpath)

    def should_traverse(self, dirpath: str) -> bool:
        """Check if a root-relative directory should be walked at all."""
        if not dirpath.endswith("/"):
            dirpath = dirpath + "/"
        return not self.spec.match_file(dirpath)
