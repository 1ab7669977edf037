"""Per-path operation locks.

Stores pointing at the same file share one re-entrant lock so that
read-modify-write cycles inside a process do not overwrite each other.
"""

from __future__ import annotations

import threading
from pathlib import Path

_REGISTRY_LOCK = threading.Lock()
_PATH_LOCKS: dict[Path, threading.RLock] = {}


def path_lock(file_path: Path) -> threading.RLock:
    """Return the shared lock for a file path.

    Args:
        file_path: Document path; resolved before lookup.

    Returns:
        Re-entrant lock unique to the resolved path.
    """
    key = file_path.resolve()
    with _REGISTRY_LOCK:
        lock = _PATH_LOCKS.get(key)
        if lock is None:
            lock = threading.RLock()
            _PATH_LOCKS[key] = lock
        return lock
