"""Tracking of directories that hold mismatched source files."""

from pathlib import Path
from typing import FrozenSet, Iterable, Set


class MismatchGuard:
    """Directories found with extra source files whose paths do not match
    their ns declarations, such as ``.cljc`` files copied into
    ``resources/public``.

    A guard lives for exactly one directory scan: it is seeded from the
    previous snapshot, handed to the locator, and its final contents are
    stored in the next snapshot. An inactive guard (used when locating files
    outside a scan) never records anything.
    """

    def __init__(self, dirs: Iterable[Path] = (), active: bool = True):
        self._dirs: Set[Path] = set(dirs)
        self.active = active

    def is_flagged(self, directory: Path) -> bool:
        return directory in self._dirs

    def flag(self, directory: Path) -> None:
        if self.active:
            self._dirs.add(directory)

    def unflag(self, directory: Path) -> None:
        if self.active:
            self._dirs.discard(directory)

    @property
    def dirs(self) -> FrozenSet[Path]:
        return frozenset(self._dirs)

    def __repr__(self) -> str:
        state = "active" if self.active else "inactive"
        return f"MismatchGuard({sorted(map(str, self._dirs))}, {state})"
