import pytest

from cleantrack.core.enums import CheckInStatus
from cleantrack.core.exceptions import AuthorizationError, ValidationError

from factories import add_location, admin_identity, manager_identity, worker_identity


def _scope(container, identity, **kwargs):
    return container.scope_resolver.resolve(identity.role, identity, **kwargs)


def test_check_in_derives_department_from_worker(two_departments):
    identity = worker_identity("w-a", "dept-a")

    event = two_departments.checkin_service.check_in(
        scope=_scope(two_departments, identity), identity=identity, location_id="loc-a", timestamp=123
    )

    assert event.department_id == "dept-a"
    assert event.worker_id == "w-a"
    assert event.timestamp == 123
    assert event.status == CheckInStatus.COMPLETED
    assert event.event_id.startswith("log-")
    assert event in two_departments.checkins_repo.list_for_department("dept-a")


def test_check_in_at_other_department_location_is_rejected(two_departments):
    identity = worker_identity("w-a", "dept-a")

    with pytest.raises(ValidationError):
        two_departments.checkin_service.check_in(
            scope=_scope(two_departments, identity), identity=identity, location_id="loc-b"
        )
    assert len(two_departments.checkins_repo.list_for_department("dept-b")) == 1


def test_unknown_location_is_rejected(two_departments):
    identity = worker_identity("w-a", "dept-a")
    with pytest.raises(ValidationError):
        two_departments.checkin_service.check_in(
            scope=_scope(two_departments, identity), identity=identity, location_id="loc-nope"
        )


def test_managers_do_not_check_in(two_departments):
    identity = manager_identity("dept-a")
    with pytest.raises(AuthorizationError):
        two_departments.checkin_service.check_in(
            scope=_scope(two_departments, identity), identity=identity, location_id="loc-a"
        )


def test_reset_clears_only_own_department(two_departments):
    add_location(two_departments, "loc-a2", "dept-a")
    identity = worker_identity("w-a", "dept-a")
    two_departments.checkin_service.check_in(
        scope=_scope(two_departments, identity), identity=identity, location_id="loc-a2"
    )

    removed = two_departments.checkin_service.reset(scope=_scope(two_departments, manager_identity("dept-a")))

    assert removed == 2
    assert two_departments.checkins_repo.list_for_department("dept-a") == []
    assert len(two_departments.checkins_repo.list_for_department("dept-b")) == 1


def test_reset_needs_a_department(two_departments):
    with pytest.raises(AuthorizationError):
        two_departments.checkin_service.reset(scope=_scope(two_departments, admin_identity()))
