from __future__ import annotations

import csv
import io
import logging
from datetime import timedelta

from flask import Flask, jsonify, request
from PIL import Image, UnidentifiedImageError
from pyzbar.pyzbar import decode as pyzbar_decode

from ..common.datetime_utils import now_utc, parse_iso_date
from ..common.web import admin_required, domain_error_response, error_response
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from .service import ScanLocation

logger = logging.getLogger(__name__)

EXPORT_FIELDS = [
    "marked_at",
    "student_id",
    "student_name",
    "programme",
    "semester",
    "status",
    "marked_by",
    "latitude",
    "longitude",
]


def register(app: Flask, container: Container) -> None:
    def _parse_date_arg(name: str, default=None):
        value = request.args.get(name)
        if not value:
            return default
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError(f"{name} must be YYYY-MM-DD")

    def _parse_course_arg():
        value = request.args.get("course_id")
        if not value:
            return None
        if not value.isdigit():
            raise ValidationError("course_id must be a number")
        return int(value)

    def _record_scan(*, student_id: str, raw_payload: str, data):
        scan_location = ScanLocation.from_values(data.get("latitude"), data.get("longitude"))
        record = container.attendance_service.record_scan(
            student_id=student_id,
            raw_payload=raw_payload,
            scan_location=scan_location,
        )
        return jsonify({"success": True, "message": "Attendance marked", "record": record.to_dict()}), 201

    @app.route("/api/attendance/scan", methods=["POST"], endpoint="api_attendance_scan")
    def api_attendance_scan():
        """Scanning client submits the decoded QR payload."""

        data = request.get_json(silent=True) or {}
        try:
            return _record_scan(
                student_id=str(data.get("student_id") or ""),
                raw_payload=str(data.get("payload") or ""),
                data=data,
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Recording scan failed")
            return error_response("System error while marking attendance", 500)

    @app.route("/api/attendance/scan/image", methods=["POST"], endpoint="api_attendance_scan_image")
    def api_attendance_scan_image():
        """Accept a photo of the code, decode it, then record like a direct scan."""

        try:
            if "image" not in request.files:
                raise ValidationError("Image file is missing")

            try:
                img = Image.open(request.files["image"].stream).convert("RGB")
            except UnidentifiedImageError:
                raise ValidationError("File is not an image")

            decoded = pyzbar_decode(img)
            if not decoded:
                raise ValidationError("No QR code found in the image")

            return _record_scan(
                student_id=request.form.get("student_id", ""),
                raw_payload=decoded[0].data.decode("utf-8").strip(),
                data=request.form,
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Recording scan from image failed")
            return error_response("System error while marking attendance", 500)

    @app.route("/admin/attendance", methods=["GET"], endpoint="admin_attendance")
    @admin_required
    def admin_attendance():
        try:
            records = container.attendance_service.list_records(
                course_id=_parse_course_arg(),
                start=_parse_date_arg("start"),
                end=_parse_date_arg("end"),
            )
        except DomainError as e:
            return domain_error_response(e)
        return jsonify({"success": True, "records": [r.to_dict() for r in records]})

    @app.route("/admin/attendance.csv", methods=["GET"], endpoint="admin_attendance_csv")
    @admin_required
    def admin_attendance_csv():
        today = now_utc().date()
        try:
            start = _parse_date_arg("start", today - timedelta(days=30))
            end = _parse_date_arg("end", today)
            data = container.attendance_service.build_export(start=start, end=end, course_id=_parse_course_arg())
        except DomainError as e:
            return domain_error_response(e)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=EXPORT_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        filename = f"attendance_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
