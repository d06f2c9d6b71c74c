"""Drive the services without Flask: flip a course link on and watch a viewer session follow it."""

import importlib

from config import get_settings_module

from src.attendance_link.attendance_link.container import LinkSettings, build_container
from src.attendance_link.attendance_link.core.enums import LinkState


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=LinkSettings.from_settings(settings))

    course = container.course_service.list_courses()[0]
    with container.open_link_session(
        programme=course.programme,
        semester="1",
        on_change=lambda snap: print(snap.state.value, snap.payload or "<no code>"),
    ):
        container.course_service.set_link_state(course.course_id, LinkState.ACTIVE)
        container.location_service.publish_location(12.9716, 77.5946)
        container.course_service.set_link_state(course.course_id, LinkState.INACTIVE)


if __name__ == "__main__":
    main()
