from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Holiday:
    """A closed date range with no classes (date_to inclusive)."""

    holiday_id: int
    title: str
    date_from: date
    date_to: date

    def covers(self, day: date) -> bool:
        return self.date_from <= day <= self.date_to

    def to_dict(self) -> dict:
        return {
            "holiday_id": self.holiday_id,
            "title": self.title,
            "date_from": self.date_from.strftime("%Y-%m-%d"),
            "date_to": self.date_to.strftime("%Y-%m-%d"),
        }
