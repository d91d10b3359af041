"""Persistence of the scan snapshot between CLI invocations."""

import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import portalocker
from pydantic import ValidationError

from .errors import StateFileError
from .snapshot import Snapshot

logger = logging.getLogger(__name__)

# Seconds to wait for another process holding the state lock
LOCK_TIMEOUT = 60


def _atomic_write_text(path: Path, text: str) -> None:
    """Atomically write text to file.

    Writes to a temp file in the same directory, fsyncs it, then renames it
    over the target so readers never see a partial file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        delete=False,
        dir=path.parent,
        prefix=f".{path.name}.tmp-",
        suffix=""
    ) as f:
        f.write(text)
        f.flush()
        os.fsync(f.fileno())
        tmp = Path(f.name)

    try:
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def load_snapshot(path: Path) -> Snapshot:
    """Load a snapshot, or an empty one if path does not exist.

    Raises:
        StateFileError: If the file exists but is not a valid snapshot
    """
    if not path.exists():
        return Snapshot()

    try:
        with path.open() as f:
            data = json.load(f)
        return Snapshot.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise StateFileError(path, type(e).__name__) from e


def save_snapshot(snapshot: Snapshot, path: Path) -> None:
    """Save a snapshot atomically."""
    state_text = json.dumps(snapshot.model_dump(mode="json"), indent=2, sort_keys=True)
    _atomic_write_text(path, state_text)
    logger.debug("Saved scan state to %s", path)


@contextmanager
def state_lock(lock_path: Path, timeout: float = LOCK_TIMEOUT) -> Iterator[None]:
    """Hold an exclusive lock while reading, scanning and writing state."""
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    with portalocker.Lock(str(lock_path), "w", timeout=timeout):
        yield
