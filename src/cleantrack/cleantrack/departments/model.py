from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Department:
    """Tenant root. Holds no list of children; membership is found by scoped query."""

    department_id: str
    display_name: str
    owner_name: str
    secret_hash: str
