"""nstrack - incremental tracking of changed namespace source files."""

from .changes import ChangeSet, compute_changes, deleted_files, modified_files
from .errors import PathResolutionError, TrackerError
from .guard import MismatchGuard
from .locator import find_files
from .platforms import Platform
from .scanner import ScanOptions, scan, scan_all, scan_dirs, scan_files
from .snapshot import Snapshot
from .track import clear_queues

__all__ = [
    "ChangeSet",
    "MismatchGuard",
    "PathResolutionError",
    "Platform",
    "ScanOptions",
    "Snapshot",
    "TrackerError",
    "clear_queues",
    "compute_changes",
    "deleted_files",
    "find_files",
    "modified_files",
    "scan",
    "scan_all",
    "scan_dirs",
    "scan_files",
]
