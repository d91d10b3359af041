"""Change set computation - which tracked files were modified or deleted."""

from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field

from .snapshot import Snapshot


class ChangeSet(BaseModel):
    """Files to (re)add to and remove from the tracker."""

    model_config = ConfigDict(frozen=True)

    modified: FrozenSet[Path] = Field(default_factory=frozenset)
    deleted: FrozenSet[Path] = Field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return not (self.modified or self.deleted)


def _mtime(path: Path) -> Optional[float]:
    try:
        return path.stat().st_mtime
    except OSError:
        return None


def present_files(files: Iterable[Path]) -> List[Path]:
    """Drop files that cannot be statted (removed since they were located)."""
    return [f for f in files if _mtime(f) is not None]


def modified_files(snapshot: Snapshot, files: Iterable[Path]) -> Set[Path]:
    """Files modified after the snapshot's last scan.

    A snapshot that was never scanned treats every file as modified. Files
    that cannot be statted are not modified.
    """
    since = snapshot.time or 0.0
    modified = set()
    for f in files:
        mtime = _mtime(f)
        if mtime is not None and mtime > since:
            modified.add(f)
    return modified


def deleted_files(snapshot: Snapshot, files: Iterable[Path]) -> Set[Path]:
    """Files tracked by the snapshot that are absent from files."""
    return set(snapshot.files) - set(files)


def compute_changes(snapshot: Snapshot, files: Iterable[Path], add_all: bool = False) -> ChangeSet:
    """
    Compute the change set for the current list of located files.

    Args:
        snapshot: State after the previous scan.
        files: Files located by this scan.
        add_all: Treat every present file as modified regardless of mtime.

    Returns:
        ChangeSet; a file is never both modified and deleted.

    Note:
        Files that vanished between location and this call are dropped
        first, so a previously tracked file that vanished is reported as
        deleted rather than raising.
    """
    present = present_files(files)
    deleted = deleted_files(snapshot, present)
    modified = set(present) if add_all else modified_files(snapshot, present)
    return ChangeSet(modified=frozenset(modified), deleted=frozenset(deleted))
