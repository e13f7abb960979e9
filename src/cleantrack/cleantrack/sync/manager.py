from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.exceptions import ScopeError, SubscriptionError
from ..scope.model import Scope
from ..store.base import CancelToken, DocumentStore
from .codecs import decode_snapshot
from .state import SessionState

LOGGER = logging.getLogger("cleantrack.sync")


@dataclass
class _Context:
    generation: int
    scope: Optional[Scope]
    collections: tuple


class SubscriptionManager:
    """Owns the live subscriptions of one logical session.

    ``set_context`` cancels every subscription of the previous context before
    opening the next set. Callbacks are tagged with the generation they were
    opened under; a callback whose generation is no longer current is dropped,
    so a late delivery from a torn-down context never reaches the state.
    Within a context, snapshots carry the store revision they reflect and the
    state keeps the newest one per collection.
    """

    def __init__(self, store: DocumentStore, state: Optional[SessionState] = None, *, label: str = ""):
        self._store = store
        self._state = state or SessionState()
        self._label = label
        self._lock = threading.RLock()
        self._context = _Context(generation=0, scope=None, collections=())
        self._tokens: list[CancelToken] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def scope(self) -> Optional[Scope]:
        return self._context.scope

    @property
    def generation(self) -> int:
        return self._context.generation

    @property
    def active_count(self) -> int:
        with self._lock:
            return sum(1 for t in self._tokens if not t.cancelled)

    def set_context(self, scope: Optional[Scope], collections: Sequence[str] = ()) -> None:
        with self._lock:
            self._teardown()
            generation = self._context.generation + 1
            wanted = tuple(collections) if scope is not None else ()
            self._context = _Context(generation=generation, scope=scope, collections=wanted)
            self._state.clear()

            for collection in wanted:
                try:
                    query = scope.query_for(collection)
                except ScopeError as e:
                    LOGGER.info(
                        "Skipping subscription: %s",
                        e,
                        extra={"component": "SubscriptionManager", "session": self._label},
                    )
                    continue
                token = self._store.subscribe(
                    collection,
                    query,
                    self._on_change(generation, collection),
                    self._on_error(generation, collection),
                )
                self._tokens.append(token)

        LOGGER.info(
            "Context %s opened (%s)",
            generation,
            ", ".join(wanted) or "no subscriptions",
            extra={
                "component": "SubscriptionManager",
                "session": self._label,
                "department_id": scope.department_id if scope else None,
            },
        )

    def close(self) -> None:
        self.set_context(None, ())

    def resync(self) -> None:
        """One-shot scoped read of every subscribed collection, applied like a live snapshot."""

        with self._lock:
            context = self._context
        if context.scope is None:
            return
        for collection in context.collections:
            try:
                query = context.scope.query_for(collection)
            except ScopeError:
                continue
            revision = self._store.revision
            try:
                docs = self._store.read(collection, query)
            except Exception as e:
                self._on_error(context.generation, collection)(SubscriptionError(str(e)))
                continue
            self._on_change(context.generation, collection)(docs, revision)

    def _teardown(self) -> None:
        tokens, self._tokens = self._tokens, []
        for token in tokens:
            token.cancel()

    def _is_current(self, generation: int) -> bool:
        return generation == self._context.generation

    def _on_change(self, generation: int, collection: str):
        def apply(docs: list, revision: int) -> None:
            try:
                items = decode_snapshot(collection, docs)
            except (KeyError, TypeError, ValueError) as e:
                self._on_error(generation, collection)(SubscriptionError(f"Undecodable snapshot: {e}"))
                return
            with self._lock:
                if not self._is_current(generation):
                    LOGGER.debug(
                        "Dropped snapshot from closed context %s",
                        generation,
                        extra={"component": "SubscriptionManager", "collection": collection},
                    )
                    return
                if not self._state.replace(collection, items, revision):
                    LOGGER.debug(
                        "Dropped snapshot at revision %s, newer one already applied",
                        revision,
                        extra={"component": "SubscriptionManager", "collection": collection},
                    )

        return apply

    def _on_error(self, generation: int, collection: str):
        def report(error: Exception) -> None:
            with self._lock:
                if not self._is_current(generation):
                    return
                self._state.mark_stale(collection, str(error))
            LOGGER.warning(
                "Live data may be stale: %s",
                error,
                extra={"component": "SubscriptionManager", "session": self._label, "collection": collection},
            )

        return report
