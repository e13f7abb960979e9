from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import DeletionRequest, ResolutionWrite


class DeletionRequestRepository(Protocol):
    def create(self, request: DeletionRequest) -> None:
        raise NotImplementedError

    def get_by_id(self, request_id: str) -> Optional[DeletionRequest]:
        raise NotImplementedError

    def list_all(self, *, status: Optional[RequestStatus] = None) -> Sequence[DeletionRequest]:
        raise NotImplementedError

    def list_pending_for_location(self, location_id: str) -> Sequence[DeletionRequest]:
        raise NotImplementedError

    def resolve(self, request: DeletionRequest, *, status: RequestStatus, resolved_at: int) -> ResolutionWrite:
        """Move a PENDING request to ``status``; when APPROVED, delete its location in the same atomic write.

        ``applied`` is False (and nothing changed) if the request was no longer
        PENDING. ``location_deleted`` is True only if this write removed the
        location document.
        """

        raise NotImplementedError
