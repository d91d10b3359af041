"""Locating trustworthy source files in a set of directories.

The pipeline runs as explicit stages: canonicalize the input directories,
drop those that do not exist, list candidate sources per directory, drop
candidates that cannot be opened, filter the rest through the mismatch guard,
then canonicalize the survivors.
"""

import logging
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Sequence, Union

from .constants import LOG_PREFIX
from .errors import PathResolutionError
from .find import find_sources_in_dir
from .guard import MismatchGuard
from .ignore import IgnoreSpec
from .matcher import path_matches_ns
from .parse import name_from_ns_decl, read_file_ns_decl
from .paths import canonicalize, relative_path
from .platforms import DEFAULT_PLATFORM, Platform

logger = logging.getLogger(__name__)


def canonical_dirs(dirs: Iterable[Union[str, Path]]) -> List[Path]:
    """Canonicalize caller-supplied directories; failures propagate."""
    return [canonicalize(d) for d in dirs]


def existing_dirs(dirs: Iterable[Path]) -> List[Path]:
    """Keep only the directories that exist."""
    return [d for d in dirs if d.exists()]


def _is_readable(path: Path) -> bool:
    try:
        with open(path, "rb"):
            return True
    except OSError:
        return False


def readable_sources(sources: Iterable[Path]) -> List[Path]:
    """Drop candidates that vanished or cannot be opened since they were listed.

    Such files are absent from this scan; they must never reach the
    mismatch check, where a missing declaration would flag the directory.
    """
    readable = []
    for source in sources:
        if _is_readable(source):
            readable.append(source)
        else:
            logger.debug("Skipping unreadable source %s", source)
    return readable


def _warn_path_mismatch(directory: Path, file: Path,
                        features: Optional[FrozenSet[str]]) -> None:
    ns_name = name_from_ns_decl(read_file_ns_decl(file, features))
    logger.warning(
        "%s ignoring directory %s\n\tbecause the ns declaration %s"
        "\n\tdoes not match the path %s",
        LOG_PREFIX, directory, ns_name, relative_path(directory, file),
    )


def trusted_sources(
    directory: Path,
    sources: Sequence[Path],
    guard: MismatchGuard,
    features: Optional[FrozenSet[str]] = None,
) -> List[Path]:
    """Filter the sources of one directory through the mismatch guard.

    A directory that is not flagged has each file checked on its own:
    mismatched files are dropped with a warning and the directory gets
    flagged. A flagged directory is all-or-nothing: it is unflagged and
    every source kept if all of them match, otherwise no source is kept.
    A source that fails to match because it can no longer be read is treated
    as absent rather than mismatched.
    """
    matching = []
    mismatched = []
    for source in sources:
        if path_matches_ns(directory, source, features):
            matching.append(source)
        elif _is_readable(source):
            mismatched.append(source)
        else:
            logger.debug("Skipping vanished source %s", source)

    if guard.is_flagged(directory):
        if not mismatched:
            logger.info(
                "%s directory %s no longer contains mismatched"
                "\n\tnamespace declarations, no longer ignoring the directory.",
                LOG_PREFIX, directory,
            )
            guard.unflag(directory)
            return matching
        logger.warning("%s ignoring directory %s", LOG_PREFIX, directory)
        return []

    for source in mismatched:
        _warn_path_mismatch(directory, source, features)
        guard.flag(directory)
    return matching


def _canonical_survivors(files: Iterable[Path]) -> List[Path]:
    survivors = []
    for f in files:
        try:
            survivors.append(canonicalize(f))
        except PathResolutionError as e:
            logger.debug("Dropping %s: %s", f, e)
    return survivors


def find_files(
    dirs: Iterable[Union[str, Path]],
    platform: Platform = DEFAULT_PLATFORM,
    guard: Optional[MismatchGuard] = None,
    ignore: Iterable[str] = (),
) -> List[Path]:
    """Find source files for platform in dirs whose paths match their ns declarations.

    Args:
        dirs: Directories to search; missing ones are skipped silently.
        platform: Selects file extensions and reader features.
        guard: Mismatch state for this scan. Without one, files are
            filtered individually and nothing is remembered.
        ignore: Extra gitignore-style patterns, relative to each directory.

    Returns:
        Canonical source files, in no guaranteed order.

    Raises:
        PathResolutionError: If one of dirs cannot be canonicalized.
    """
    if guard is None:
        guard = MismatchGuard(active=False)
    ignore = tuple(ignore)

    located: List[Path] = []
    for directory in existing_dirs(canonical_dirs(dirs)):
        sources = readable_sources(
            find_sources_in_dir(directory, platform, IgnoreSpec(directory, ignore))
        )
        located.extend(trusted_sources(directory, sources, guard, platform.features))
    return _canonical_survivors(located)
