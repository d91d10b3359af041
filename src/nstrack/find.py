"""Discovery of candidate source files and classpath directories."""

import os
from pathlib import Path
from typing import List, Optional

from .constants import CLASSPATH_ENV_VARS
from .context import ProjectContext
from .ignore import IgnoreSpec
from .platforms import DEFAULT_PLATFORM, Platform


def find_sources_in_dir(
    directory: Path,
    platform: Platform = DEFAULT_PLATFORM,
    ignore: Optional[IgnoreSpec] = None,
) -> List[Path]:
    """All files under directory with one of the platform's extensions, sorted.

    Directory symlinks below the top level are not followed.
    """
    directory = Path(directory)
    extensions = platform.extensions
    found = []

    for root, dirnames, filenames in os.walk(directory):
        rel_root = Path(root).relative_to(directory)
        if ignore is not None:
            dirnames[:] = [
                d for d in dirnames
                if ignore.should_traverse((rel_root / d).as_posix())
            ]
        for name in filenames:
            if Path(name).suffix not in extensions:
                continue
            if ignore is not None and ignore.is_ignored((rel_root / name).as_posix()):
                continue
            found.append(Path(root) / name)

    return sorted(found)


def classpath_directories() -> List[Path]:
    """Directories to scan when the caller names none.

    Uses the first of NSTRACK_CLASSPATH or CLASSPATH that is set, keeping
    only entries that are directories (archives are skipped). Without
    either, falls back to the source_dirs of the project enclosing the
    current directory.
    """
    for var in CLASSPATH_ENV_VARS:
        value = os.environ.get(var)
        if value:
            entries = [Path(p) for p in value.split(os.pathsep) if p]
            return [p for p in entries if p.is_dir()]

    return [d for d in ProjectContext().source_dirs() if d.is_dir()]
