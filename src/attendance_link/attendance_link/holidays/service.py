from __future__ import annotations

from datetime import date
from typing import Optional

from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import Holiday
from .repository import HolidayRepository


class HolidayService:
    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    @staticmethod
    def _check_range(date_from: date, date_to: Optional[date]) -> date:
        date_to = date_to or date_from
        if date_to < date_from:
            raise ValidationError("Holiday cannot end before it starts")
        return date_to

    def list_holidays(self) -> list[Holiday]:
        return sorted(self._holidays.list_all(), key=lambda h: (h.date_from, h.holiday_id))

    def add_holiday(self, *, title: str, date_from: date, date_to: Optional[date] = None) -> Holiday:
        title = require_non_empty(title, "Title")
        date_to = self._check_range(date_from, date_to)
        holiday_id = self._holidays.create(title=title, date_from=date_from, date_to=date_to)
        return Holiday(holiday_id=holiday_id, title=title, date_from=date_from, date_to=date_to)

    def update_holiday(self, *, holiday_id: int, title: str, date_from: date, date_to: Optional[date] = None) -> Holiday:
        title = require_non_empty(title, "Title")
        date_to = self._check_range(date_from, date_to)
        if not self._holidays.update(holiday_id=int(holiday_id), title=title, date_from=date_from, date_to=date_to):
            raise NotFoundError("Holiday not found")
        return Holiday(holiday_id=int(holiday_id), title=title, date_from=date_from, date_to=date_to)

    def delete_holiday(self, holiday_id: int) -> None:
        if not self._holidays.delete(holiday_id=int(holiday_id)):
            raise NotFoundError("Holiday not found")

    def holiday_on(self, day: date) -> Optional[Holiday]:
        for h in self.list_holidays():
            if h.covers(day):
                return h
        return None

    def is_holiday(self, day: date) -> bool:
        return self.holiday_on(day) is not None
