from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Worker:
    """Cleaner account, owned by exactly one department."""

    worker_id: str
    department_id: str
    display_name: str
    secret_hash: str
    avatar: str = ""


@dataclass(frozen=True)
class WorkerDirectoryEntry:
    """What the login screen may see about a worker: no credential material."""

    worker_id: str
    department_id: str
    display_name: str
    avatar: str
