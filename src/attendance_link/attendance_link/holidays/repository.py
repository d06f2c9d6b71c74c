from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import Holiday


class HolidayRepository(Protocol):
    def list_all(self) -> Sequence[Holiday]:
        raise NotImplementedError

    def create(self, *, title: str, date_from: date, date_to: date) -> int:
        raise NotImplementedError

    def update(self, *, holiday_id: int, title: str, date_from: date, date_to: date) -> bool:
        raise NotImplementedError

    def delete(self, *, holiday_id: int) -> bool:
        raise NotImplementedError
