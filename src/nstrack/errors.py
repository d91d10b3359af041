"""Custom exceptions for nstrack.

This module defines typed exceptions for the failures that reach the caller
of a scan. Recoverable conditions (mismatched files, vanished candidates,
missing directories) never raise; they are reflected in the returned
snapshot and in log messages.
"""

from pathlib import Path
from typing import Union


class TrackerError(RuntimeError):
    """Base class for all nstrack errors."""
    pass


class PathResolutionError(TrackerError):
    """An explicitly supplied path could not be canonicalized.

    This is the I/O failure of path resolution. It is not an ``OSError``;
    callers catch it as a ``TrackerError``. The underlying ``OSError`` (or
    the ``RuntimeError`` of a symlink loop) is kept as ``__cause__``.
    """

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot resolve path {path}: {reason}")


class DeclarationError(TrackerError):
    """Source file header could not be read as a sequence of forms."""

    def __init__(self, message: str, path: Union[str, Path, None] = None):
        self.path = Path(path) if path is not None else None
        location = f" in {path}" if path is not None else ""
        super().__init__(f"{message}{location}")


# Configuration Errors
class ConfigError(TrackerError):
    """Base class for configuration errors."""
    pass


class InvalidPlatformError(ConfigError):
    """Unknown platform name."""

    def __init__(self, name: str, valid: list):
        self.name = name
        super().__init__(
            f"Unknown platform '{name}'. "
            f"Expected one of: {', '.join(valid)}"
        )


# State Errors
class StateFileError(TrackerError):
    """Persisted scan state could not be loaded."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(
            f"Scan state at {path} is unreadable ({reason}). "
            f"Run 'nstrack reset' to start from an empty state."
        )
