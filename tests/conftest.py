from __future__ import annotations

import pytest

from cleantrack.container import build_container
from cleantrack.store.memory_store import InMemoryDocumentStore

from factories import add_checkin, add_department, add_location, add_worker, make_settings


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def container(store):
    return build_container(settings=make_settings(), store=store)


@pytest.fixture
def two_departments(container):
    """Departments A and B, each with one worker, one location and one check-in."""

    add_department(container, "dept-a", "Store A", owner="Alice")
    add_department(container, "dept-b", "Store B", owner="Bob")
    add_worker(container, "w-a", "dept-a", "Ann")
    add_worker(container, "w-b", "dept-b", "Ben")
    add_location(container, "loc-a", "dept-a", name="Lobby A")
    add_location(container, "loc-b", "dept-b", name="Lobby B")
    add_checkin(container, "log-a", "dept-a", "loc-a", "w-a", 1_700_000_000_000)
    add_checkin(container, "log-b", "dept-b", "loc-b", "w-b", 1_700_000_000_000)
    return container
