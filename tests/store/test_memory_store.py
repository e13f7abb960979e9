import pytest

from cleantrack.store.base import BatchOp, PreconditionFailed, Query
from cleantrack.store.memory_store import InMemoryDocumentStore


def test_read_applies_equality_filter():
    store = InMemoryDocumentStore()
    store.write("locations", "l1", {"department_id": "a", "name_en": "Lobby"})
    store.write("locations", "l2", {"department_id": "b", "name_en": "Hall"})

    docs = store.read("locations", Query.where("department_id", "a"))

    assert [d["id"] for d in docs] == ["l1"]


def test_write_merge_keeps_existing_fields():
    store = InMemoryDocumentStore()
    store.write("workers", "w1", {"display_name": "Ann", "department_id": "a"})
    store.write("workers", "w1", {"avatar": "x.png"}, merge=True)

    assert store.get("workers", "w1") == {"id": "w1", "display_name": "Ann", "department_id": "a", "avatar": "x.png"}


def test_read_returns_copies():
    store = InMemoryDocumentStore()
    store.write("workers", "w1", {"display_name": "Ann"})

    store.get("workers", "w1")["display_name"] = "changed"

    assert store.get("workers", "w1")["display_name"] == "Ann"


def test_failed_precondition_applies_nothing():
    store = InMemoryDocumentStore()
    store.write("deletion_requests", "r1", {"status": "approved"})
    store.write("locations", "l1", {"department_id": "a"})

    with pytest.raises(PreconditionFailed):
        store.atomic_batch(
            [
                BatchOp.update("deletion_requests", "r1", {"status": "rejected"}, expect={"status": "pending"}),
                BatchOp.delete("locations", "l1"),
            ]
        )

    assert store.get("deletion_requests", "r1")["status"] == "approved"
    assert store.get("locations", "l1") is not None


def test_update_of_missing_document_fails():
    store = InMemoryDocumentStore()
    with pytest.raises(PreconditionFailed):
        store.atomic_batch([BatchOp.update("locations", "nope", {"zone": "x"})])


def test_delete_of_missing_document_is_noop():
    store = InMemoryDocumentStore()
    store.delete("locations", "nope")
    store.atomic_batch([BatchOp.delete("locations", "nope")])
    assert store.read("locations") == []


def test_subscribe_delivers_initial_and_filtered_snapshots():
    store = InMemoryDocumentStore()
    store.write("checkins", "e1", {"department_id": "a"})
    seen = []

    store.subscribe("checkins", Query.where("department_id", "a"), lambda docs, revision: seen.append(sorted(d["id"] for d in docs)))
    store.write("checkins", "e2", {"department_id": "b"})
    store.write("checkins", "e3", {"department_id": "a"})

    # Initial, then one full snapshot per commit to the collection.
    assert seen == [["e1"], ["e1"], ["e1", "e3"]]
    assert all("e2" not in snap for snap in seen)


def test_batch_notifies_once_per_collection():
    store = InMemoryDocumentStore()
    seen = []
    store.subscribe("checkins", Query.all(), lambda docs, revision: seen.append(len(docs)))

    store.atomic_batch([BatchOp.set("checkins", f"e{i}", {"department_id": "a"}) for i in range(3)])

    assert seen == [0, 3]


def test_cancel_is_idempotent_and_stops_delivery():
    store = InMemoryDocumentStore()
    seen = []
    token = store.subscribe("locations", Query.all(), lambda docs, revision: seen.append(len(docs)))

    token.cancel()
    token.cancel()
    store.write("locations", "l1", {"department_id": "a"})

    assert token.cancelled
    assert seen == [0]
    assert store.listener_count == 0


def test_failing_subscriber_does_not_break_writer():
    store = InMemoryDocumentStore()
    calls = []

    def boom(docs, revision):
        calls.append(len(docs))
        if docs:
            raise RuntimeError("subscriber bug")

    store.subscribe("locations", Query.all(), boom)
    store.write("locations", "l1", {"department_id": "a"})

    assert store.get("locations", "l1") is not None
    assert calls == [0, 1]


def test_every_commit_bumps_revision_and_tags_snapshots():
    store = InMemoryDocumentStore()
    seen = []
    store.subscribe("checkins", Query.all(), lambda docs, revision: seen.append((len(docs), revision)))

    store.write("checkins", "e1", {"department_id": "a"})
    store.atomic_batch([BatchOp.set("checkins", "e2", {"department_id": "a"})])

    assert store.revision == 2
    assert seen == [(0, 0), (1, 1), (2, 2)]


def test_batch_reports_only_documents_it_removed():
    store = InMemoryDocumentStore()
    store.write("locations", "l1", {"department_id": "a"})

    removed = store.atomic_batch([BatchOp.delete("locations", "l1"), BatchOp.delete("locations", "gone")])

    assert removed == {("locations", "l1")}
    assert store.atomic_batch([BatchOp.delete("locations", "l1")]) == set()
