from __future__ import annotations

import contextlib
import os
import threading
from pathlib import Path
from typing import Iterator

if os.name == "posix":
    import fcntl
else:
    fcntl = None


class PathLockRegistry:
    """
    Provides a stable lock per normalized file path to avoid global contention.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, path: Path) -> threading.Lock:
        key = str(path.resolve())
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock


GLOBAL_PATH_LOCKS = PathLockRegistry()


@contextlib.contextmanager
def exclusive_file_lock(path: Path) -> Iterator[None]:
    """
    Hold an advisory exclusive lock on `path` so that several worker processes
    sharing one data directory serialize their compare-and-swap sections.

    Only threads of one process are serialized on platforms without fcntl.
    """
    if fcntl is None:
        yield
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a+b") as f:
        fcntl.flock(f.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)


@contextlib.contextmanager
def document_lock(path: Path, lock_path: Path) -> Iterator[None]:
    with GLOBAL_PATH_LOCKS.lock_for(path):
        with exclusive_file_lock(lock_path):
            yield
