"""Track namespace dependencies and changes by monitoring file-modification
timestamps.

``scan_dirs`` and ``scan_files`` take the snapshot from the previous scan and
return the next one. When nothing changed they return the very same
snapshot, so repeated scans of an unchanged tree are free and idempotent.
"""

import logging
import time
import warnings
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from .changes import ChangeSet, compute_changes
from .find import classpath_directories
from .guard import MismatchGuard
from .locator import find_files
from .platforms import DEFAULT_PLATFORM, Platform
from .snapshot import Snapshot
from .track import add_files, remove_files

logger = logging.getLogger(__name__)


class ScanOptions(BaseModel):
    """Options for a scan.

    platform: controls file extensions and reader features.
    add_all: if True, assumes all extant files are modified regardless of
        filesystem timestamps.
    ignore: extra gitignore-style patterns applied under each directory.
    """

    model_config = ConfigDict(frozen=True)

    platform: Platform = DEFAULT_PLATFORM
    add_all: bool = False
    ignore: Tuple[str, ...] = ()


def _update_files(snapshot: Snapshot, changes: ChangeSet, platform: Platform) -> Snapshot:
    now = time.time()
    files = (set(snapshot.files) - changes.deleted) | changes.modified
    snapshot = remove_files(snapshot, changes.deleted)
    snapshot = add_files(snapshot, changes.modified, platform)
    return snapshot.model_copy(update={"files": frozenset(files), "time": now})


def scan_files(
    snapshot: Snapshot,
    files: Iterable[Path],
    options: Optional[ScanOptions] = None,
) -> Snapshot:
    """Scan files to find those which have changed since the last scan.

    Updates the dependency graph with new, changed and deleted files and
    returns the new snapshot. Returns ``snapshot`` itself when nothing
    changed.
    """
    options = options or ScanOptions()
    changes = compute_changes(snapshot, files, add_all=options.add_all)
    if changes.is_empty:
        logger.debug("No changes since last scan")
        return snapshot

    logger.debug(
        "Scan found %d modified and %d deleted files",
        len(changes.modified), len(changes.deleted),
    )
    return _update_files(snapshot, changes, options.platform)


def scan_dirs(
    snapshot: Snapshot,
    dirs: Union[str, Path, Iterable[Union[str, Path]], None] = None,
    options: Optional[ScanOptions] = None,
) -> Snapshot:
    """Scan directories for files which have changed since the last scan.

    dirs defaults to the classpath directories; a single str or Path is
    scanned as one directory. Directories containing files whose ns
    declaration does not match the path are ignored, with a warning, until
    they are clean again.

    Raises:
        PathResolutionError: If one of dirs cannot be canonicalized.
    """
    options = options or ScanOptions()
    if isinstance(dirs, (str, Path)):
        dirs = [dirs]
    dirs = list(dirs or ()) or classpath_directories()

    guard = MismatchGuard(snapshot.mismatch_dirs)
    files = find_files(dirs, options.platform, guard, options.ignore)
    result = scan_files(snapshot, files, options)

    if result.mismatch_dirs == guard.dirs:
        return result
    return result.model_copy(update={"mismatch_dirs": guard.dirs})


def scan(snapshot: Snapshot, *dirs: Union[str, Path]) -> Snapshot:
    """DEPRECATED: replaced by scan_dirs.

    Scans directories for Clojure (.clj, .cljc) source files which have
    changed since the last scan. If no dirs given, defaults to the
    classpath directories.
    """
    warnings.warn("scan is deprecated, use scan_dirs", DeprecationWarning, stacklevel=2)
    return scan_dirs(snapshot, dirs, ScanOptions(platform=Platform.CLJ))


def scan_all(snapshot: Snapshot, *dirs: Union[str, Path]) -> Snapshot:
    """DEPRECATED: replaced by scan_dirs.

    Scans directories for all Clojure source files, treating every file as
    modified. If no dirs given, defaults to the classpath directories.
    """
    warnings.warn("scan_all is deprecated, use scan_dirs", DeprecationWarning, stacklevel=2)
    return scan_dirs(snapshot, dirs, ScanOptions(platform=Platform.CLJ, add_all=True))
