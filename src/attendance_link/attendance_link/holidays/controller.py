from __future__ import annotations

import logging
from datetime import date

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import admin_required, domain_error_response, error_response
from ..core.exceptions import DomainError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _date(value, field_name: str, *, required: bool = True):
        if not value:
            if required:
                raise ValidationError(f"{field_name} is required")
            return None
        try:
            return parse_iso_date(str(value))
        except ValueError:
            raise ValidationError(f"{field_name} must be YYYY-MM-DD")

    def _holiday_fields():
        data = request.get_json(silent=True) or request.form
        return {
            "title": data.get("title", ""),
            "date_from": _date(data.get("date_from"), "Start date"),
            "date_to": _date(data.get("date_to"), "End date", required=False),
        }

    @app.route("/admin/holidays", methods=["GET"], endpoint="admin_holidays")
    @admin_required
    def admin_holidays():
        holidays = container.holiday_service.list_holidays()
        return jsonify({"success": True, "holidays": [h.to_dict() for h in holidays]})

    @app.route("/admin/holidays", methods=["POST"], endpoint="admin_holidays_add")
    @admin_required
    def admin_holidays_add():
        try:
            holiday = container.holiday_service.add_holiday(**_holiday_fields())
            return jsonify({"success": True, "holiday": holiday.to_dict()}), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Adding holiday failed")
            return error_response("System error while saving the holiday", 500)

    @app.route("/admin/holidays/<int:holiday_id>", methods=["POST"], endpoint="admin_holidays_update")
    @admin_required
    def admin_holidays_update(holiday_id: int):
        try:
            holiday = container.holiday_service.update_holiday(holiday_id=holiday_id, **_holiday_fields())
            return jsonify({"success": True, "holiday": holiday.to_dict()})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Updating holiday %s failed", holiday_id)
            return error_response("System error while saving the holiday", 500)

    @app.route("/admin/holidays/<int:holiday_id>/delete", methods=["POST"], endpoint="admin_holidays_delete")
    @admin_required
    def admin_holidays_delete(holiday_id: int):
        try:
            container.holiday_service.delete_holiday(holiday_id)
            return jsonify({"success": True})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Deleting holiday %s failed", holiday_id)
            return error_response("System error while deleting the holiday", 500)

    @app.route("/api/holidays/check", methods=["GET"], endpoint="api_holidays_check")
    def api_holidays_check():
        try:
            day = _date(request.args.get("date"), "date", required=False) or date.today()
        except DomainError as e:
            return domain_error_response(e)

        holiday = container.holiday_service.holiday_on(day)
        return jsonify(
            {
                "success": True,
                "date": day.strftime("%Y-%m-%d"),
                "is_holiday": holiday is not None,
                "holiday": holiday.to_dict() if holiday else None,
            }
        )
