import pytest

from cleantrack.core.constants import COLLECTION_LOCATIONS
from cleantrack.core.enums import RequestStatus
from cleantrack.core.exceptions import AuthorizationError, ValidationError
from cleantrack.deletion.model import DeletionRequest

from factories import admin_identity, manager_identity


def _scope(container, identity, **kwargs):
    return container.scope_resolver.resolve(identity.role, identity, **kwargs)


def _request(container, location_id="loc-a", department_id="dept-a"):
    identity = manager_identity(department_id, "Store A", owner="Alice")
    outcome = container.location_service.remove_location(
        scope=_scope(container, identity), identity=identity, location_id=location_id
    )
    assert not outcome.deleted
    return outcome.request


def test_manager_removal_files_pending_request(two_departments):
    request = _request(two_departments)

    assert request.status == RequestStatus.PENDING
    assert request.location_name == "Lobby A"
    assert request.manager_name == "Alice"
    assert request.department_name == "Store A"
    assert two_departments.locations_repo.get_by_id("loc-a") is not None


def test_second_removal_reuses_open_request(two_departments):
    first = _request(two_departments)
    second = _request(two_departments)

    assert first.request_id == second.request_id
    assert len(two_departments.deletion_requests_repo.list_all()) == 1


def test_manager_cannot_request_for_other_department(two_departments):
    with pytest.raises(AuthorizationError):
        _request(two_departments, location_id="loc-b", department_id="dept-a")


def test_approve_deletes_location_and_keeps_captured_name(two_departments):
    request = _request(two_departments)
    admin = _scope(two_departments, admin_identity())

    outcome = two_departments.deletion_workflow.resolve(scope=admin, request_id=request.request_id, approve=True)

    assert outcome.applied and outcome.location_deleted
    assert outcome.request.status == RequestStatus.APPROVED
    assert outcome.request.resolved_at is not None
    assert two_departments.locations_repo.get_by_id("loc-a") is None
    stored = two_departments.deletion_requests_repo.get_by_id(request.request_id)
    assert stored.status == RequestStatus.APPROVED
    assert stored.location_name == "Lobby A"


def test_reject_keeps_location(two_departments):
    request = _request(two_departments)
    admin = _scope(two_departments, admin_identity())

    outcome = two_departments.deletion_workflow.resolve(scope=admin, request_id=request.request_id, approve=False)

    assert outcome.applied and not outcome.location_deleted
    assert outcome.request.status == RequestStatus.REJECTED
    assert two_departments.locations_repo.get_by_id("loc-a") is not None


def test_resolving_twice_is_a_noop(two_departments):
    request = _request(two_departments)
    admin = _scope(two_departments, admin_identity())
    workflow = two_departments.deletion_workflow

    workflow.resolve(scope=admin, request_id=request.request_id, approve=False)
    again = workflow.resolve(scope=admin, request_id=request.request_id, approve=True)

    assert not again.applied
    assert again.request.status == RequestStatus.REJECTED
    assert two_departments.locations_repo.get_by_id("loc-a") is not None


def test_stale_request_object_loses_the_race(two_departments):
    request = _request(two_departments)
    repo = two_departments.deletion_requests_repo

    assert repo.resolve(request, status=RequestStatus.REJECTED, resolved_at=1).applied
    # Same in-memory snapshot of the request, still PENDING from the caller's view.
    assert not repo.resolve(request, status=RequestStatus.APPROVED, resolved_at=2).applied

    assert repo.get_by_id(request.request_id).status == RequestStatus.REJECTED
    assert two_departments.locations_repo.get_by_id("loc-a") is not None


def test_approve_when_location_already_gone_closes_request(two_departments):
    request = _request(two_departments)
    two_departments.locations_repo.delete_by_id("loc-a")
    admin = _scope(two_departments, admin_identity())

    outcome = two_departments.deletion_workflow.resolve(scope=admin, request_id=request.request_id, approve=True)

    assert outcome.applied
    assert not outcome.location_deleted
    assert outcome.request.status == RequestStatus.APPROVED


def test_only_top_admin_resolves(two_departments):
    request = _request(two_departments)
    manager = _scope(two_departments, manager_identity("dept-a"))

    with pytest.raises(AuthorizationError):
        two_departments.deletion_workflow.resolve(scope=manager, request_id=request.request_id, approve=True)


def test_unknown_request_is_rejected(two_departments):
    admin = _scope(two_departments, admin_identity())
    with pytest.raises(ValidationError):
        two_departments.deletion_workflow.resolve(scope=admin, request_id="req-nope", approve=True)


def test_drilled_in_admin_deletes_directly(two_departments):
    identity = admin_identity()
    scope = _scope(two_departments, identity, selected_department_id="dept-b")

    outcome = two_departments.location_service.remove_location(scope=scope, identity=identity, location_id="loc-b")

    assert outcome.deleted
    assert two_departments.locations_repo.get_by_id("loc-b") is None
    assert two_departments.deletion_requests_repo.list_all() == []


def test_direct_delete_needs_matching_department(two_departments):
    scope = _scope(two_departments, admin_identity(), selected_department_id="dept-b")
    with pytest.raises(AuthorizationError):
        two_departments.deletion_workflow.delete_location_directly(scope=scope, location_id="loc-a")


def test_pending_filter_lists_newest_first(two_departments):
    first = _request(two_departments)
    admin = _scope(two_departments, admin_identity())
    two_departments.deletion_workflow.resolve(scope=admin, request_id=first.request_id, approve=False)
    second = _request(two_departments)

    pending = two_departments.deletion_workflow.list_requests(scope=admin, status=RequestStatus.PENDING)

    assert [r.request_id for r in pending] == [second.request_id]


def test_location_removed_during_approval_is_not_reported_as_deleted(two_departments, store, monkeypatch):
    request = _request(two_departments)
    admin = _scope(two_departments, admin_identity())
    commit = store.atomic_batch

    def batch_after_direct_delete(ops):
        # A direct delete lands between the workflow's read and its commit.
        store.delete(COLLECTION_LOCATIONS, "loc-a")
        return commit(ops)

    monkeypatch.setattr(store, "atomic_batch", batch_after_direct_delete)
    outcome = two_departments.deletion_workflow.resolve(scope=admin, request_id=request.request_id, approve=True)

    assert outcome.applied
    assert not outcome.location_deleted
    assert outcome.request.status == RequestStatus.APPROVED
    assert two_departments.locations_repo.get_by_id("loc-a") is None


def _pending(request_id, timestamp):
    return DeletionRequest(
        request_id=request_id,
        location_id="loc-a",
        location_name="Lobby A",
        department_id="dept-a",
        manager_name="Alice",
        department_name="Store A",
        timestamp=timestamp,
    )


def test_resolving_one_of_concurrent_requests_closes_the_others(two_departments):
    repo = two_departments.deletion_requests_repo
    # Two filings that both passed the open-request check.
    repo.create(_pending("req-1", 1))
    repo.create(_pending("req-2", 2))
    admin = _scope(two_departments, admin_identity())

    outcome = two_departments.deletion_workflow.resolve(scope=admin, request_id="req-2", approve=False)

    assert outcome.applied
    assert repo.get_by_id("req-1").status == RequestStatus.REJECTED
    assert repo.get_by_id("req-2").status == RequestStatus.REJECTED
    assert repo.list_pending_for_location("loc-a") == []
    assert two_departments.locations_repo.get_by_id("loc-a") is not None


def test_new_filing_returns_oldest_open_request(two_departments):
    repo = two_departments.deletion_requests_repo
    repo.create(_pending("req-1", 1))
    repo.create(_pending("req-2", 2))

    assert _request(two_departments).request_id == "req-1"
