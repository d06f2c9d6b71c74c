from __future__ import annotations

from datetime import date

import pytest

from src.attendance_link.attendance_link.core.exceptions import NotFoundError, ValidationError
from src.attendance_link.attendance_link.holidays.service import HolidayService


@pytest.fixture
def service(holidays_repo):
    return HolidayService(holidays_repo)


def test_single_day_holiday_defaults_end_to_start(service):
    h = service.add_holiday(title="Republic Day", date_from=date(2026, 1, 26))

    assert h.date_to == date(2026, 1, 26)
    assert service.is_holiday(date(2026, 1, 26))
    assert not service.is_holiday(date(2026, 1, 27))


def test_range_is_inclusive_and_list_is_sorted(service):
    service.add_holiday(title="Diwali break", date_from=date(2026, 11, 7), date_to=date(2026, 11, 10))
    service.add_holiday(title="Holi", date_from=date(2026, 3, 4))

    assert [h.title for h in service.list_holidays()] == ["Holi", "Diwali break"]
    assert service.holiday_on(date(2026, 11, 10)).title == "Diwali break"
    assert service.holiday_on(date(2026, 11, 11)) is None


def test_end_before_start_is_rejected(service):
    with pytest.raises(ValidationError):
        service.add_holiday(title="Bad", date_from=date(2026, 5, 2), date_to=date(2026, 5, 1))


def test_title_required(service):
    with pytest.raises(ValidationError):
        service.add_holiday(title=" ", date_from=date(2026, 5, 1))


def test_update_and_delete(service):
    h = service.add_holiday(title="Holi", date_from=date(2026, 3, 4))

    updated = service.update_holiday(holiday_id=h.holiday_id, title="Holi (observed)", date_from=date(2026, 3, 5))
    assert updated.title == "Holi (observed)"
    assert service.is_holiday(date(2026, 3, 5))
    assert not service.is_holiday(date(2026, 3, 4))

    service.delete_holiday(h.holiday_id)
    assert service.list_holidays() == []


def test_update_or_delete_missing(service):
    with pytest.raises(NotFoundError):
        service.update_holiday(holiday_id=9, title="x", date_from=date(2026, 1, 1))
    with pytest.raises(NotFoundError):
        service.delete_holiday(9)
