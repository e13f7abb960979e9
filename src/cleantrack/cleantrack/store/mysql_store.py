from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional, Sequence

from ..core.constants import DEPARTMENT_FIELD
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, load_json_body
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

LOGGER = logging.getLogger("cleantrack.store")


def _where(collection: str, query: Query) -> tuple[str, list]:
    clauses = ["collection=%s"]
    params: list[object] = [collection]
    for name, value in query.equals:
        if name == DEPARTMENT_FIELD:
            # Indexed column.
            if value is None:
                clauses.append("department_id IS NULL")
            else:
                clauses.append("department_id=%s")
                params.append(str(value))
        else:
            clauses.append("JSON_EXTRACT(body, %s) = CAST(%s AS JSON)")
            params.extend([f'$."{name}"', json.dumps(value)])
    return " AND ".join(clauses), params


def _department_of(body: Mapping[str, Any]) -> Optional[str]:
    value = body.get(DEPARTMENT_FIELD)
    return str(value) if value is not None else None


class MySQLDocumentStore:
    """Document store over a single MySQL ``documents`` table.

    Change notification is in-process: subscribers registered on this store
    are pushed a fresh snapshot after every commit made through it. Writes by
    other processes are picked up by a session's manual resync.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory
        self._listeners = ListenerRegistry(self.read)

    @property
    def revision(self) -> int:
        return self._listeners.revision

    def read(self, collection: str, query: Optional[Query] = None) -> list:
        where, params = _where(collection, query or Query.all())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT doc_id, body FROM documents WHERE {where} ORDER BY doc_id", tuple(params))
            rows = fetchall(cur)
        out: list[Document] = []
        for r in rows:
            body = load_json_body(r["body"])
            body["id"] = r["doc_id"]
            out.append(body)
        return out

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT doc_id, body FROM documents WHERE collection=%s AND doc_id=%s",
                (collection, doc_id),
            )
            row = fetchone(cur)
        if not row:
            return None
        body = load_json_body(row["body"])
        body["id"] = row["doc_id"]
        return body

    def subscribe(
        self,
        collection: str,
        query: Query,
        on_change: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> CancelToken:
        return self._listeners.add(collection, query, on_change, on_error)

    def write(self, collection: str, doc_id: str, doc: Mapping[str, Any], *, merge: bool = False) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            self._write(cur, collection, doc_id, doc, merge=merge)
        self._listeners.notify([collection])

    def delete(self, collection: str, doc_id: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM documents WHERE collection=%s AND doc_id=%s", (collection, doc_id))
            removed = cur.rowcount > 0
        if removed:
            self._listeners.notify([collection])

    def atomic_batch(self, ops: Sequence[BatchOp]) -> set:
        if not ops:
            return set()
        removed = set()
        # db_cursor commits on success and rolls back on any exception.
        with db_cursor(self._conn_factory) as (_, cur):
            for op in ops:
                if op.kind not in {"set", "update", "delete"}:
                    raise StoreError(f"Unsupported batch op: {op.kind}")
                if op.kind != "update":
                    continue
                cur.execute(
                    "SELECT body FROM documents WHERE collection=%s AND doc_id=%s FOR UPDATE",
                    (op.collection, op.doc_id),
                )
                row = fetchone(cur)
                if not row:
                    raise PreconditionFailed(f"{op.collection}/{op.doc_id} does not exist")
                body = load_json_body(row["body"])
                for name, expected in (op.expect or {}).items():
                    if body.get(name) != expected:
                        raise PreconditionFailed(
                            f"{op.collection}/{op.doc_id}: expected {name}={expected!r}, found {body.get(name)!r}"
                        )

            for op in ops:
                if op.kind == "delete":
                    cur.execute(
                        "DELETE FROM documents WHERE collection=%s AND doc_id=%s",
                        (op.collection, op.doc_id),
                    )
                    if cur.rowcount > 0:
                        removed.add((op.collection, op.doc_id))
                else:
                    self._write(cur, op.collection, op.doc_id, op.data or {}, merge=op.kind == "update")
        self._listeners.notify(op.collection for op in ops)
        return removed

    def _write(self, cur, collection: str, doc_id: str, doc: Mapping[str, Any], *, merge: bool) -> None:
        body: dict[str, Any] = {}
        if merge:
            cur.execute(
                "SELECT body FROM documents WHERE collection=%s AND doc_id=%s FOR UPDATE",
                (collection, doc_id),
            )
            row = fetchone(cur)
            if row:
                body = load_json_body(row["body"])
        body.update(dict(doc))
        body["id"] = doc_id
        cur.execute(
            """
            INSERT INTO documents(collection, doc_id, department_id, body)
            VALUES(%s,%s,%s,%s)
            ON DUPLICATE KEY UPDATE department_id=VALUES(department_id), body=VALUES(body)
            """,
            (collection, doc_id, _department_of(body), json.dumps(body, ensure_ascii=False)),
        )
        LOGGER.debug("Wrote %s/%s", collection, doc_id, extra={"component": "MySQLDocumentStore"})
