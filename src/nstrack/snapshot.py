"""Tracker snapshot threaded through successive scans."""

from pathlib import Path
from typing import Dict, FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class Snapshot(BaseModel):
    """
    Immutable tracker state.

    ``files`` is exactly the set of canonical source files incorporated into
    the dependency graph as of ``time``. ``Snapshot()`` is the empty state:
    with no ``time`` every file on disk counts as modified.

    The graph fields (``filemap``, ``deps``, ``unload``, ``load``) are owned
    by :mod:`nstrack.track`; the scanner only passes them through.
    """

    model_config = ConfigDict(frozen=True)

    files: FrozenSet[Path] = Field(default_factory=frozenset)
    time: Optional[float] = None  # epoch seconds of the last scan that changed something
    mismatch_dirs: FrozenSet[Path] = Field(default_factory=frozenset)

    # Dependency graph
    filemap: Dict[Path, str] = Field(default_factory=dict)  # file -> namespace
    deps: Dict[str, FrozenSet[str]] = Field(default_factory=dict)  # namespace -> required
    unload: Tuple[str, ...] = ()
    load: Tuple[str, ...] = ()

    @field_serializer("filemap", when_used="json")
    def serialize_filemap(self, filemap: Dict[Path, str]) -> Dict[str, str]:
        return {str(path): ns for path, ns in filemap.items()}

    @property
    def namespaces(self) -> FrozenSet[str]:
        """Namespaces currently known to the graph."""
        return frozenset(self.deps)

    @property
    def has_pending(self) -> bool:
        """True if namespaces are queued for unload or load."""
        return bool(self.unload or self.load)
