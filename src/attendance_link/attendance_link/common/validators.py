from __future__ import annotations

import re
from typing import Any, Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def optional_text(value: Any) -> Optional[str]:
    s = str(value).strip() if value is not None else ""
    return s or None


def require_email(value: Any, field_name: str = "Email") -> str:
    email = require_non_empty(value, field_name).lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError(f"{field_name} is not a valid address")
    return email


def require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a whole number")
    if isinstance(value, int):
        number = value
    else:
        s = str(value if value is not None else "").strip()
        # isdigit() alone lets through characters such as "²" that int() rejects.
        if not (s.isascii() and s.isdigit()):
            raise ValidationError(f"{field_name} must be a whole number")
        number = int(s)

    if number <= 0:
        raise ValidationError(f"{field_name} must be a whole number")
    return number


def optional_positive_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or str(value).strip() == "":
        return None
    return require_positive_int(value, field_name)


def parse_semester(value: Any) -> int:
    """Semester route parameter must be a positive whole number.

    No best-effort parsing: '3rd' or '2.5' are rejected rather than guessed.
    """

    return require_positive_int(value, "Semester")


def require_coordinate(value: Any, field_name: str, *, limit: float) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")

    if v != v or not -limit <= v <= limit:
        raise ValidationError(f"{field_name} must be between -{limit:g} and {limit:g}")
    return v


def require_latitude(value: Any) -> float:
    return require_coordinate(value, "Latitude", limit=90.0)


def require_longitude(value: Any) -> float:
    return require_coordinate(value, "Longitude", limit=180.0)
