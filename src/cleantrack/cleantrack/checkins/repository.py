from __future__ import annotations

from typing import Protocol, Sequence

from .model import CheckInEvent


class CheckInRepository(Protocol):
    def append(self, event: CheckInEvent) -> None:
        """Create the event once; events are never updated."""

        raise NotImplementedError

    def list_for_department(self, department_id: str) -> Sequence[CheckInEvent]:
        raise NotImplementedError

    def delete_all_for_department(self, department_id: str) -> int:
        """Bulk reset for one department; returns how many events were removed."""

        raise NotImplementedError
