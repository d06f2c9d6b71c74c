from __future__ import annotations

import logging
from urllib.parse import quote

from flask import Flask, jsonify, render_template, request

from ..common.web import admin_required, domain_error_response, error_response
from ..core.enums import CourseStatus, LinkState
from ..core.exceptions import DomainError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _course_json(course):
        data = course.to_dict()
        data["link_path"] = f"/link/{quote(course.programme, safe='')}"
        return data

    @app.route("/admin", endpoint="admin_courses_page")
    @admin_required
    def admin_courses_page():
        courses = container.course_service.list_courses(request.args.get("q"))
        return render_template("admin/courses.html", courses=courses, q=request.args.get("q") or "", active_page="courses")

    @app.route("/admin/courses", methods=["GET"], endpoint="admin_courses")
    @admin_required
    def admin_courses():
        courses = container.course_service.list_courses(request.args.get("q"))
        return jsonify({"success": True, "courses": [_course_json(c) for c in courses]})

    @app.route("/admin/courses", methods=["POST"], endpoint="admin_courses_create")
    @admin_required
    def admin_courses_create():
        data = request.get_json(silent=True) or request.form
        try:
            try:
                status = CourseStatus(data.get("status") or CourseStatus.ACTIVE.value)
                duration = int(data.get("duration_months") or 0)
            except ValueError:
                raise ValidationError("Invalid course status or duration")

            course = container.course_service.create_course(
                programme=data.get("programme", ""),
                duration_months=duration,
                status=status,
            )
            return jsonify({"success": True, "course": _course_json(course)}), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Creating course failed")
            return error_response("System error while creating the course", 500)

    @app.route("/admin/courses/<int:course_id>/link", methods=["POST"], endpoint="admin_course_link")
    @admin_required
    def admin_course_link(course_id: int):
        data = request.get_json(silent=True) or request.form
        try:
            try:
                state = LinkState(data.get("state", ""))
            except ValueError:
                raise ValidationError("State must be Active or Inactive")

            course = container.course_service.set_link_state(course_id, state)
            return jsonify({"success": True, "course": _course_json(course)})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Updating link state of course %s failed", course_id)
            return error_response("Failed to update link status", 500)

    @app.route("/admin/courses/<int:course_id>/link/toggle", methods=["POST"], endpoint="admin_course_link_toggle")
    @admin_required
    def admin_course_link_toggle(course_id: int):
        try:
            course = container.course_service.toggle_link_state(course_id)
            return jsonify({"success": True, "course": _course_json(course)})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Toggling link state of course %s failed", course_id)
            return error_response("Failed to update link status", 500)
