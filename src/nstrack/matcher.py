"""Checks that a source file's path agrees with its namespace declaration."""

from pathlib import Path
from typing import FrozenSet, Optional

from .parse import name_from_ns_decl, read_file_ns_decl


def expected_path(directory: Path, ns_name: str) -> Path:
    """Path a file under directory must start with to declare ns_name.

    ``my-app.core`` in ``/src`` gives ``/src/my_app/core``.
    """
    segments = ns_name.replace("-", "_").split(".")
    return Path(directory, *segments)


def path_matches_ns(directory: Path, file: Path,
                    features: Optional[FrozenSet[str]] = None) -> bool:
    """True if the ns declaration of file matches its path relative to directory.

    A file without a readable declaration never matches.
    """
    ns_name = name_from_ns_decl(read_file_ns_decl(file, features))
    if ns_name is None:
        return False
    return str(file).startswith(str(expected_path(directory, ns_name)))
