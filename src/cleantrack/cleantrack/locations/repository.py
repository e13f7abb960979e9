from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Location


class LocationRepository(Protocol):
    def get_by_id(self, location_id: str) -> Optional[Location]:
        raise NotImplementedError

    def list_for_department(self, department_id: str) -> Sequence[Location]:
        raise NotImplementedError

    def save(self, location: Location) -> None:
        raise NotImplementedError

    def delete_by_id(self, location_id: str) -> None:
        raise NotImplementedError
