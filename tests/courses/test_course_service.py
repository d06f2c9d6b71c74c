from __future__ import annotations

import pytest

from src.attendance_link.attendance_link.core.enums import ChangeKind, CourseStatus, LinkState
from src.attendance_link.attendance_link.core.exceptions import NotFoundError, ValidationError
from src.attendance_link.attendance_link.courses.service import CourseService, match_programme
from src.attendance_link.attendance_link.realtime.feed import course_channel


@pytest.fixture
def service(courses_repo, feed):
    return CourseService(courses_repo, feed)


def test_match_programme(courses_repo):
    courses = courses_repo.list_all()
    assert match_programme(courses, "bca").course_id == 1
    assert match_programme(courses, "B.Sc%2FIT").course_id == 3
    assert match_programme(courses, "BC") is None
    assert match_programme(courses, "") is None


def test_list_courses_with_search(service):
    assert [c.programme for c in service.list_courses("mba")] == ["MBA Finance"]
    assert len(service.list_courses()) == 3


def test_set_link_state_persists_and_notifies_with_full_course(service, courses_repo, feed):
    events = []
    feed.subscribe(course_channel(1), events.append)

    course = service.set_link_state(1, LinkState.ACTIVE)

    assert course.link_state is LinkState.ACTIVE
    assert courses_repo.get_by_id(1).link_state is LinkState.ACTIVE
    assert len(events) == 1
    assert events[0].kind is ChangeKind.UPDATE
    assert events[0].payload.programme == "BCA"
    assert events[0].payload.link_state is LinkState.ACTIVE


def test_set_link_state_is_idempotent(service, feed):
    events = []
    feed.subscribe(course_channel(2), events.append)

    service.set_link_state(2, LinkState.ACTIVE)
    service.set_link_state(2, "Active")

    assert service.get_course(2).link_state is LinkState.ACTIVE
    assert len(events) == 2


def test_set_link_state_unknown_course(service):
    with pytest.raises(NotFoundError):
        service.set_link_state(404, LinkState.ACTIVE)


def test_set_link_state_rejects_unknown_value(service):
    with pytest.raises(ValueError):
        service.set_link_state(1, "Maybe")


def test_toggle(service):
    assert service.toggle_link_state(1).link_state is LinkState.ACTIVE
    assert service.toggle_link_state(1).link_state is LinkState.INACTIVE


def test_create_course_starts_inactive(service):
    course = service.create_course(programme="  M.Tech  ", duration_months=24)

    assert course.programme == "M.Tech"
    assert course.link_state is LinkState.INACTIVE
    assert course.status is CourseStatus.ACTIVE


@pytest.mark.parametrize(
    "programme,duration",
    [("", 12), ("   ", 12), ("bca", 12), ("New", -1)],
)
def test_create_course_validation(service, programme, duration):
    with pytest.raises(ValidationError):
        service.create_course(programme=programme, duration_months=duration)


def test_find_by_programme(service):
    assert service.find_by_programme("mba%20finance").course_id == 2
    with pytest.raises(NotFoundError):
        service.find_by_programme("Astrophysics")
