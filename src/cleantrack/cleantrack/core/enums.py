from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Session roles used for scoping and permission checks."""

    TOP_ADMIN = "top_admin"
    MANAGER = "manager"
    WORKER = "worker"


class CheckInStatus(str, Enum):
    COMPLETED = "completed"
    # Reserved, nothing produces it yet.
    FLAGGED = "flagged"


class RequestStatus(str, Enum):
    """Deletion request lifecycle. APPROVED and REJECTED are terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Classification(str, Enum):
    OVERACHIEVED = "overachieved"
    AT_RISK = "at_risk"
    ON_TRACK = "on_track"
