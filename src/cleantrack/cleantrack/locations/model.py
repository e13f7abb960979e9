from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    """A place to clean, with a daily check-in target (always >= 1)."""

    location_id: str
    department_id: str
    name_en: str
    name_zh: str
    zone: str
    target_daily_frequency: int

    def display_name(self, language: str = "en") -> str:
        if language == "zh":
            return self.name_zh or self.name_en
        return self.name_en or self.name_zh
