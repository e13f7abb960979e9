from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from ..core.exceptions import SubscriptionError
from .base import CancelToken, ErrorCallback, Query, SnapshotCallback

LOGGER = logging.getLogger("cleantrack.store")


@dataclass
class Listener:
    token: CancelToken
    on_change: SnapshotCallback
    on_error: Optional[ErrorCallback]


class ListenerRegistry:
    """In-process fan-out of full snapshots to live subscribers.

    ``reader`` is the store's own scoped read; it runs outside any store lock
    so a slow callback never blocks writers.

    Every notified commit bumps ``revision``. A snapshot is tagged with the
    revision read just before the snapshot itself, so it contains at least
    every commit up to that revision; subscribers drop snapshots tagged older
    than one they already applied.
    """

    def __init__(self, reader: Callable[[str, Query], list]):
        self._reader = reader
        self._lock = threading.Lock()
        self._listeners: list[Listener] = []
        self._revision = 0

    @property
    def revision(self) -> int:
        with self._lock:
            return self._revision

    def add(
        self,
        collection: str,
        query: Query,
        on_change: SnapshotCallback,
        on_error: Optional[ErrorCallback],
    ) -> CancelToken:
        token = CancelToken(collection=collection, query=query)
        listener = Listener(token=token, on_change=on_change, on_error=on_error)
        token._on_cancel = lambda: self._remove(listener)
        with self._lock:
            self._listeners.append(listener)
        self.deliver(listener)
        return token

    def _remove(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def deliver(self, listener: Listener) -> None:
        if listener.token.cancelled:
            return
        revision = self.revision
        try:
            snapshot = self._reader(listener.token.collection, listener.token.query)
        except Exception as e:
            LOGGER.warning(
                "Snapshot read failed",
                exc_info=True,
                extra={"component": "ListenerRegistry", "collection": listener.token.collection},
            )
            if listener.on_error:
                listener.on_error(SubscriptionError(str(e)))
            return
        try:
            listener.on_change(snapshot, revision)
        except Exception:
            # Subscriber failures never propagate to the writer.
            LOGGER.exception(
                "Subscriber callback failed",
                extra={"component": "ListenerRegistry", "collection": listener.token.collection},
            )

    def notify(self, collections: Iterable[str]) -> None:
        touched = set(collections)
        with self._lock:
            self._revision += 1
            targets = [l for l in self._listeners if l.token.collection in touched]
        for listener in targets:
            self.deliver(listener)

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)
