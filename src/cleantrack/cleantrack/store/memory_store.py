from __future__ import annotations

import copy
import threading
from typing import Any, Mapping, Optional, Sequence

from .base import (
    BatchOp,
    CancelToken,
    Document,
    ErrorCallback,
    PreconditionFailed,
    Query,
    SnapshotCallback,
    StoreError,
)
from .listeners import ListenerRegistry


class InMemoryDocumentStore:
    """Thread-safe in-process document store with push notifications.

    Used by the development/testing settings and by the test suite. Every
    commit re-delivers the filtered snapshot to each live listener of the
    touched collections, the writer's own listeners included.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._collections: dict[str, dict[str, Document]] = {}
        self._listeners = ListenerRegistry(self.read)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    @property
    def revision(self) -> int:
        return self._listeners.revision

    def read(self, collection: str, query: Optional[Query] = None) -> list:
        query = query or Query.all()
        with self._lock:
            docs = self._collections.get(collection, {})
            return [copy.deepcopy(d) for d in docs.values() if query.matches(d)]

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with self._lock:
            doc = self._collections.get(collection, {}).get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    def subscribe(
        self,
        collection: str,
        query: Query,
        on_change: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> CancelToken:
        return self._listeners.add(collection, query, on_change, on_error)

    def write(self, collection: str, doc_id: str, doc: Mapping[str, Any], *, merge: bool = False) -> None:
        with self._lock:
            docs = self._collections.setdefault(collection, {})
            body = dict(docs.get(doc_id, {})) if merge else {}
            body.update(copy.deepcopy(dict(doc)))
            body["id"] = doc_id
            docs[doc_id] = body
        self._listeners.notify([collection])

    def delete(self, collection: str, doc_id: str) -> None:
        with self._lock:
            removed = self._collections.get(collection, {}).pop(doc_id, None)
        if removed is not None:
            self._listeners.notify([collection])

    def atomic_batch(self, ops: Sequence[BatchOp]) -> set:
        if not ops:
            return set()
        removed = set()
        with self._lock:
            for op in ops:
                self._check(op)
            for op in ops:
                if self._apply(op):
                    removed.add((op.collection, op.doc_id))
        self._listeners.notify(op.collection for op in ops)
        return removed

    def _check(self, op: BatchOp) -> None:
        if op.kind not in {"set", "update", "delete"}:
            raise StoreError(f"Unsupported batch op: {op.kind}")
        if op.kind != "update":
            return
        current = self._collections.get(op.collection, {}).get(op.doc_id)
        if current is None:
            raise PreconditionFailed(f"{op.collection}/{op.doc_id} does not exist")
        for name, expected in (op.expect or {}).items():
            if current.get(name) != expected:
                raise PreconditionFailed(
                    f"{op.collection}/{op.doc_id}: expected {name}={expected!r}, found {current.get(name)!r}"
                )

    def _apply(self, op: BatchOp) -> bool:
        """Apply one op; True only for a delete that removed a document."""

        docs = self._collections.setdefault(op.collection, {})
        if op.kind == "delete":
            return docs.pop(op.doc_id, None) is not None
        body = dict(docs.get(op.doc_id, {})) if op.kind == "update" else {}
        body.update(copy.deepcopy(dict(op.data or {})))
        body["id"] = op.doc_id
        docs[op.doc_id] = body
        return False
