"""Shared test fixtures and utilities."""

import os
import time
from pathlib import Path

import pytest

from nstrack.snapshot import Snapshot


# Timestamp safely before any scan a test performs
PAST = time.time() - 3600


def source_path(directory: Path, ns: str, ext: str) -> Path:
    """Path at which a file declaring ns is expected to live."""
    return directory / (ns.replace("-", "_").replace(".", "/") + "." + ext)


def ns_text(ns: str, deps=()) -> str:
    if not deps:
        return f"(ns {ns})\n"
    return f"(ns {ns}\n  (:require {' '.join(deps)}))\n"


@pytest.fixture
def create_source():
    """Factory fixture writing a namespace source file under a directory.

    The file's mtime is set to an hour ago so scans never race the write.
    """
    def _create(directory: Path, ns: str, ext: str = "clj", deps=(), mtime: float = PAST) -> Path:
        path = source_path(directory, ns, ext)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(ns_text(ns, deps))
        os.utime(path, (mtime, mtime))
        return path
    return _create


@pytest.fixture
def create_copy():
    """Factory fixture copying a file to a new location, keeping its mtime."""
    def _copy(src: Path, dest: Path) -> Path:
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(src.read_text())
        st = src.stat()
        os.utime(dest, (st.st_atime, st.st_mtime))
        return dest
    return _copy


@pytest.fixture
def touch():
    """Factory fixture bumping a file's mtime into the future."""
    def _touch(path: Path, seconds: float = 5.0) -> Path:
        future = time.time() + seconds
        os.utime(path, (future, future))
        return path
    return _touch


@pytest.fixture
def src_dir(tmp_path):
    """An empty source directory."""
    d = tmp_path / "src"
    d.mkdir()
    return d


@pytest.fixture
def empty_snapshot():
    return Snapshot()


@pytest.fixture
def same_files():
    """Compare two collections of files after resolving symlinks."""
    def _same(expected, actual) -> bool:
        return {Path(p).resolve() for p in expected} == {Path(p).resolve() for p in actual}
    return _same
