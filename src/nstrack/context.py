"""Project context for locating nstrack's configuration and state files."""

from pathlib import Path
from typing import Optional

from .config import TrackerConfig, load_tracker_config
from .constants import CONFIG_FILE, LOCK_FILE, NSTRACK_DIR, STATE_FILE


class ProjectContext:
    """Manages project root discovery and the paths stored beneath it.

    The root is the nearest ancestor of the start path holding a
    ``.nstrack`` directory, or the start path itself when there is none.
    """

    def __init__(self, start_path: Optional[Path] = None):
        start = (start_path or Path.cwd()).resolve()
        self.root = self._find_root(start) or start
        self._config: Optional[TrackerConfig] = None

    @classmethod
    def init(cls, path: Optional[Path] = None) -> "ProjectContext":
        """Initialize a new project at the given path."""
        target = path or Path.cwd()
        (target / NSTRACK_DIR).mkdir(parents=True, exist_ok=True)
        return cls(target)

    def _find_root(self, start: Path) -> Optional[Path]:
        """Walk up directory tree to find project root."""
        for current in (start, *start.parents):
            if (current / NSTRACK_DIR).is_dir():
                return current
        return None

    @property
    def storage_dir(self) -> Path:
        return self.root / NSTRACK_DIR

    @property
    def config_path(self) -> Path:
        return self.storage_dir / CONFIG_FILE

    @property
    def state_path(self) -> Path:
        return self.storage_dir / STATE_FILE

    @property
    def lock_path(self) -> Path:
        return self.storage_dir / LOCK_FILE

    @property
    def config(self) -> TrackerConfig:
        """Project configuration (memoized)."""
        if self._config is None:
            self._config = load_tracker_config(self.root)
        return self._config

    def source_dirs(self) -> list:
        """Configured source directories as absolute paths."""
        return [self.root / d for d in self.config.source_dirs]
