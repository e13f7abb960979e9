from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Any, Optional

from .checkins.document_repository import DocumentCheckInRepository
from .checkins.service import CheckInService
from .common.datetime_utils import load_timezone
from .compliance.policy import CompliancePolicy, FullPeriodPolicy
from .core.constants import AT_RISK_THRESHOLD_PERCENT, DEFAULT_SESSION_IDLE_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .deletion.document_repository import DocumentDeletionRequestRepository
from .deletion.workflow import DeletionWorkflow
from .departments.document_repository import DocumentDepartmentRepository
from .departments.service import DepartmentService
from .locations.document_repository import DocumentLocationRepository
from .locations.service import LocationService
from .scope.resolver import ScopeResolver
from .sessions.registry import SessionRegistry
from .sessions.service import AuthService
from .store.base import DocumentStore
from .store.memory_store import InMemoryDocumentStore
from .store.mysql_store import MySQLDocumentStore
from .workers.directory import WorkerDirectory
from .workers.document_repository import DocumentWorkerRepository
from .workers.service import WorkerService


@dataclass(frozen=True)
class Container:
    store: DocumentStore
    conn: Optional[DatabaseConnection]

    departments_repo: DocumentDepartmentRepository
    workers_repo: DocumentWorkerRepository
    locations_repo: DocumentLocationRepository
    checkins_repo: DocumentCheckInRepository
    deletion_requests_repo: DocumentDeletionRequestRepository

    worker_directory: WorkerDirectory
    scope_resolver: ScopeResolver
    sessions: SessionRegistry

    auth_service: AuthService
    department_service: DepartmentService
    worker_service: WorkerService
    location_service: LocationService
    checkin_service: CheckInService
    deletion_workflow: DeletionWorkflow

    compliance_policy: CompliancePolicy
    report_tz: Optional[tzinfo]


def build_store(settings: Any) -> tuple[DocumentStore, Optional[DatabaseConnection]]:
    backend = str(getattr(settings, "STORE_BACKEND", "mysql")).lower()
    if backend == "memory":
        return InMemoryDocumentStore(), None
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))
    return MySQLDocumentStore(conn), conn


def build_container(*, settings: Any, store: Optional[DocumentStore] = None) -> Container:
    conn: Optional[DatabaseConnection] = None
    if store is None:
        store, conn = build_store(settings)

    departments_repo = DocumentDepartmentRepository(store)
    workers_repo = DocumentWorkerRepository(store)
    locations_repo = DocumentLocationRepository(store)
    checkins_repo = DocumentCheckInRepository(store)
    deletion_requests_repo = DocumentDeletionRequestRepository(store)

    worker_directory = WorkerDirectory(store)
    scope_resolver = ScopeResolver(departments_repo, workers_repo)
    sessions = SessionRegistry(
        store,
        scope_resolver,
        idle_minutes=int(getattr(settings, "SESSION_IDLE_MINUTES", DEFAULT_SESSION_IDLE_MINUTES)),
    )

    deletion_workflow = DeletionWorkflow(deletion_requests_repo, locations_repo)
    auth_service = AuthService(
        departments_repo,
        worker_directory,
        top_admin_password=getattr(settings, "TOP_ADMIN_PASSWORD", None),
    )

    return Container(
        store=store,
        conn=conn,
        departments_repo=departments_repo,
        workers_repo=workers_repo,
        locations_repo=locations_repo,
        checkins_repo=checkins_repo,
        deletion_requests_repo=deletion_requests_repo,
        worker_directory=worker_directory,
        scope_resolver=scope_resolver,
        sessions=sessions,
        auth_service=auth_service,
        department_service=DepartmentService(departments_repo),
        worker_service=WorkerService(workers_repo, departments_repo),
        location_service=LocationService(locations_repo, deletion_workflow),
        checkin_service=CheckInService(checkins_repo, locations_repo, workers_repo),
        deletion_workflow=deletion_workflow,
        compliance_policy=FullPeriodPolicy(
            int(getattr(settings, "AT_RISK_THRESHOLD_PERCENT", AT_RISK_THRESHOLD_PERCENT))
        ),
        report_tz=load_timezone(getattr(settings, "REPORT_TIMEZONE", None)),
    )
