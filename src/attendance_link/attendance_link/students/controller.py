from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.web import admin_required, domain_error_response, error_response
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)

STUDENT_FIELDS = ("name", "email", "gender", "abc_id", "course_id", "semester", "status", "batch", "year", "address")


def register(app: Flask, container: Container) -> None:
    def _student_fields() -> dict:
        data = request.get_json(silent=True) or request.form
        return {name: data.get(name) for name in STUDENT_FIELDS}

    @app.route("/admin/students", methods=["GET"], endpoint="admin_students")
    @admin_required
    def admin_students():
        try:
            students = container.student_service.list_students(
                course_id=request.args.get("course_id"),
                semester=request.args.get("semester"),
                status=request.args.get("status"),
                search=request.args.get("q"),
            )
        except DomainError as e:
            return domain_error_response(e)
        return jsonify({"success": True, "students": [s.to_dict() for s in students]})

    @app.route("/admin/students", methods=["POST"], endpoint="admin_students_add")
    @admin_required
    def admin_students_add():
        try:
            student = container.student_service.create_student(**_student_fields())
            return jsonify({"success": True, "student": student.to_dict()}), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Adding student failed")
            return error_response("System error while saving the student", 500)

    @app.route("/admin/students/<int:student_id>", methods=["GET"], endpoint="admin_students_detail")
    @admin_required
    def admin_students_detail(student_id: int):
        try:
            student = container.student_service.get_student(student_id)
        except DomainError as e:
            return domain_error_response(e)
        return jsonify({"success": True, "student": student.to_dict()})

    @app.route("/admin/students/<int:student_id>", methods=["POST"], endpoint="admin_students_update")
    @admin_required
    def admin_students_update(student_id: int):
        try:
            student = container.student_service.update_student(student_id, **_student_fields())
            return jsonify({"success": True, "student": student.to_dict()})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Updating student %s failed", student_id)
            return error_response("System error while saving the student", 500)

    @app.route("/admin/students/<int:student_id>/delete", methods=["POST"], endpoint="admin_students_delete")
    @admin_required
    def admin_students_delete(student_id: int):
        try:
            container.student_service.delete_student(student_id)
            return jsonify({"success": True})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Deleting student %s failed", student_id)
            return error_response("System error while deleting the student", 500)
