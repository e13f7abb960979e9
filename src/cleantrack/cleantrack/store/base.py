"""Document store contract.

The store is a document database: each collection holds JSON-like dicts keyed
by id. Reads and live subscriptions take an equality ``Query``; the filter is
applied by the store itself, never by the caller after the fact. Live
subscriptions receive the full filtered snapshot on every change, tagged with
the store revision it reflects.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Protocol, Sequence

from ..core.exceptions import DomainError

Document = dict
SnapshotCallback = Callable[[list, int], None]
ErrorCallback = Callable[[Exception], None]


class StoreError(DomainError):
    """Raised when the underlying store rejects an operation."""


class PreconditionFailed(StoreError):
    """Raised when an ``expect`` clause of a batch op does not hold."""


@dataclass(frozen=True)
class Query:
    """Conjunction of field equality filters."""

    equals: tuple = ()

    @classmethod
    def all(cls) -> "Query":
        return cls()

    @classmethod
    def where(cls, field_name: str, value: Any) -> "Query":
        return cls(equals=((field_name, value),))

    @property
    def is_unfiltered(self) -> bool:
        return not self.equals

    def matches(self, doc: Mapping[str, Any]) -> bool:
        return all(doc.get(name) == value for name, value in self.equals)


@dataclass(frozen=True)
class BatchOp:
    kind: str
    collection: str
    doc_id: str
    data: Optional[Mapping[str, Any]] = None
    expect: Optional[Mapping[str, Any]] = None

    @classmethod
    def set(cls, collection: str, doc_id: str, data: Mapping[str, Any]) -> "BatchOp":
        return cls("set", collection, doc_id, dict(data))

    @classmethod
    def update(
        cls,
        collection: str,
        doc_id: str,
        data: Mapping[str, Any],
        *,
        expect: Optional[Mapping[str, Any]] = None,
    ) -> "BatchOp":
        """Merge ``data`` into an existing document; fails if it is missing or ``expect`` does not match."""

        return cls("update", collection, doc_id, dict(data), dict(expect) if expect else None)

    @classmethod
    def delete(cls, collection: str, doc_id: str) -> "BatchOp":
        """Delete a document; deleting a missing document is a no-op."""

        return cls("delete", collection, doc_id)


@dataclass
class CancelToken:
    """Handle for one live subscription. ``cancel()`` may be called any number of times."""

    collection: str
    query: Query
    _on_cancel: Optional[Callable[[], None]] = None
    _cancelled: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            hook, self._on_cancel = self._on_cancel, None
        if hook:
            hook()


class DocumentStore(Protocol):
    @property
    def revision(self) -> int:
        """Counter bumped by every notified commit; a snapshot read after observing it includes those commits."""

        raise NotImplementedError

    def read(self, collection: str, query: Optional[Query] = None) -> list:
        raise NotImplementedError

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        raise NotImplementedError

    def subscribe(
        self,
        collection: str,
        query: Query,
        on_change: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> CancelToken:
        """Deliver the current snapshot now and again after every change to ``collection``.

        ``on_change`` receives ``(docs, revision)``. Deliveries may arrive out
        of order across writer threads; a snapshot tagged with a lower revision
        than one already seen is older and should be dropped.
        """

        raise NotImplementedError

    def write(self, collection: str, doc_id: str, doc: Mapping[str, Any], *, merge: bool = False) -> None:
        raise NotImplementedError

    def delete(self, collection: str, doc_id: str) -> None:
        raise NotImplementedError

    def atomic_batch(self, ops: Sequence[BatchOp]) -> set:
        """Apply every op or none of them.

        Returns the ``(collection, doc_id)`` pairs that delete ops actually
        removed; deleting a missing document is a no-op and is not listed.
        """

        raise NotImplementedError
