from __future__ import annotations

import threading
from typing import Optional


class SessionState:
    """Local, read-only mirror of the collections a session subscribes to.

    Every snapshot replaces the previous one for its collection; nothing is
    merged. A snapshot tagged with a store revision older than the last one
    applied to that collection is ignored.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshots: dict[str, tuple] = {}
        self._stale: dict[str, str] = {}
        self._revisions: dict[str, int] = {}
        self._version = 0

    def replace(self, collection: str, items: tuple, revision: Optional[int] = None) -> bool:
        with self._lock:
            if revision is not None:
                if revision < self._revisions.get(collection, -1):
                    return False
                self._revisions[collection] = revision
            self._snapshots[collection] = tuple(items)
            self._stale.pop(collection, None)
            self._version += 1
            return True

    def revision(self, collection: str) -> Optional[int]:
        with self._lock:
            return self._revisions.get(collection)

    def mark_stale(self, collection: str, reason: str) -> None:
        with self._lock:
            self._stale[collection] = reason
            self._version += 1

    def clear(self) -> None:
        with self._lock:
            self._snapshots.clear()
            self._stale.clear()
            self._revisions.clear()
            self._version += 1

    def get(self, collection: str) -> tuple:
        with self._lock:
            return self._snapshots.get(collection, ())

    def collections(self) -> list[str]:
        with self._lock:
            return sorted(self._snapshots)

    @property
    def stale(self) -> bool:
        with self._lock:
            return bool(self._stale)

    def stale_reason(self, collection: str) -> Optional[str]:
        with self._lock:
            return self._stale.get(collection)

    @property
    def version(self) -> int:
        with self._lock:
            return self._version
