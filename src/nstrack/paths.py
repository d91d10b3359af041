"""Path canonicalization helpers.

Every file and directory the scanner tracks goes through ``canonicalize`` so
that a source tree reached through a symbolic link is the same entity as the
tree it points at.
"""

from pathlib import Path
from typing import Optional, Union

from .errors import PathResolutionError


def canonicalize(path: Union[str, Path]) -> Path:
    """Return the absolute, symlink-free form of path.

    The path does not have to exist.

    Raises:
        PathResolutionError: If resolution fails (symlink loop, permissions)
    """
    try:
        return Path(path).resolve()
    except (OSError, RuntimeError) as e:
        raise PathResolutionError(path, str(e)) from e


def relative_path(directory: Path, file: Path) -> Optional[Path]:
    """Path of file relative to directory, or None if directory is not an ancestor.

    Compares path components only; nothing is resolved against the filesystem.
    """
    parts = []
    current = Path(file)
    directory = Path(directory)
    while current != directory:
        parent = current.parent
        if parent == current:
            return None
        parts.append(current.name)
        current = parent
    return Path(*reversed(parts))
