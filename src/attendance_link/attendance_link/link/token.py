from __future__ import annotations

import base64
import io
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import qrcode

from ..common.datetime_utils import parse_iso8601, to_iso8601
from ..common.validators import parse_semester, require_latitude, require_longitude
from ..core.exceptions import ValidationError
from ..courses.model import Course
from ..locations.model import LocationSample


@dataclass(frozen=True)
class TokenPayload:
    """Decoded form of the JSON carried by the displayed QR code."""

    course_id: int
    semester: int
    generated_at: datetime
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None


def build_payload(course: Optional[Course], semester, now: datetime, location: Optional[LocationSample]) -> str:
    """Compute the QR payload for one render.

    Empty string whenever the course link is not Active, so nothing can be
    displayed. Raises ValidationError for a non-numeric semester.
    """

    if course is None or not course.is_link_active:
        return ""

    data = {
        "courseId": course.course_id,
        "semester": parse_semester(semester),
        "dateTime": to_iso8601(now),
        "location": (
            {"latitude": location.latitude, "longitude": location.longitude}
            if location is not None
            else None
        ),
    }
    return json.dumps(data, separators=(",", ":"))


def decode_payload(raw: str) -> TokenPayload:
    try:
        data = json.loads(raw or "")
    except (TypeError, ValueError):
        raise ValidationError("Invalid QR code")
    if not isinstance(data, dict):
        raise ValidationError("Invalid QR code")

    course_id = data.get("courseId")
    if isinstance(course_id, bool) or not isinstance(course_id, int):
        raise ValidationError("Invalid QR code: course is missing")

    semester = parse_semester(data.get("semester"))

    try:
        generated_at = parse_iso8601(str(data["dateTime"]))
    except (KeyError, ValueError):
        raise ValidationError("Invalid QR code: timestamp is missing")

    latitude = longitude = None
    location = data.get("location")
    if location is not None:
        if not isinstance(location, dict):
            raise ValidationError("Invalid QR code: bad location")
        latitude = require_latitude(location.get("latitude"))
        longitude = require_longitude(location.get("longitude"))

    return TokenPayload(
        course_id=course_id,
        semester=semester,
        generated_at=generated_at,
        latitude=latitude,
        longitude=longitude,
    )


def render_qr_png(payload: str, *, box_size: int = 10, border: int = 2) -> bytes:
    if not payload:
        raise ValidationError("Nothing to encode: the attendance link is inactive")

    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def qr_data_url(payload: str) -> str:
    """PNG of the payload as an inline data URL, or "" when there is nothing to show."""

    if not payload:
        return ""
    return "data:image/png;base64," + base64.b64encode(render_qr_png(payload)).decode("ascii")
