"""
Request validation rules.

Pure checks run before any store or session mutation. Each function raises
ValidationError with the first rule that fails and does not look at later
fields.
"""
import json
import re
from typing import Any, Tuple
from app.core.errors import ValidationError

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
YEAR_MIN = 2020
YEAR_MAX = 2100
MONTH_MIN = 0  # January, zero-based like the calendar UI
MONTH_MAX = 11

USERNAME_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')
PASSWORD_COMPLEXITY_PATTERN = re.compile(r'^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)')
INTEGER_PATTERN = re.compile(r'^[+-]?\d+$')


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def validate_username(username: Any) -> str:
    """Return the trimmed username or raise."""
    username = _as_text(username).strip()
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        raise ValidationError(
            f"Username must be between {USERNAME_MIN_LENGTH} and "
            f"{USERNAME_MAX_LENGTH} characters"
        )
    if not USERNAME_PATTERN.match(username):
        raise ValidationError(
            "Username can only contain letters, numbers, dashes, and underscores"
        )
    return username


def validate_password(password: Any, label: str = "Password") -> str:
    password = _as_text(password)
    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        raise ValidationError(
            f"{label} must be between {PASSWORD_MIN_LENGTH} and "
            f"{PASSWORD_MAX_LENGTH} characters"
        )
    if not PASSWORD_COMPLEXITY_PATTERN.match(password):
        raise ValidationError(
            "Password must contain at least one lowercase letter, "
            "one uppercase letter, and one digit"
        )
    return password


def validate_registration(username: Any, password: Any) -> Tuple[str, str]:
    username = validate_username(username)
    password = validate_password(password)
    return username, password


def validate_login(username: Any, password: Any) -> Tuple[str, str]:
    """Login only needs both fields present; shape rules apply at registration."""
    username = _as_text(username).strip()
    password = _as_text(password)
    if not username or not password:
        raise ValidationError("Username and password are required")
    return username, password


def validate_password_change(current_password: Any, new_password: Any) -> Tuple[str, str]:
    current_password = _as_text(current_password)
    if not current_password:
        raise ValidationError("Current password is required")
    new_password = validate_password(new_password, label="New password")
    return current_password, new_password


def _as_int(value: Any):
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and INTEGER_PATTERN.match(value.strip()):
        return int(value.strip())
    return None


def validate_year(value: Any) -> int:
    year = _as_int(value)
    if year is None or not YEAR_MIN <= year <= YEAR_MAX:
        raise ValidationError("Invalid year")
    return year


def validate_month(value: Any) -> int:
    month = _as_int(value)
    if month is None or not MONTH_MIN <= month <= MONTH_MAX:
        raise ValidationError("Invalid month")
    return month


def validate_timesheet_data(data: Any) -> dict:
    """The payload must be a JSON object, not a scalar or an array."""
    if not isinstance(data, dict):
        raise ValidationError("Invalid timesheet data")
    try:
        # NaN and Infinity parse from the request but are not valid JSON
        json.dumps(data, allow_nan=False)
    except ValueError:
        raise ValidationError("Invalid timesheet data") from None
    return data


def validate_timesheet_payload(year: Any, month: Any, data: Any) -> Tuple[int, int, dict]:
    year = validate_year(year)
    month = validate_month(month)
    data = validate_timesheet_data(data)
    return year, month, data


def parse_period(year: Any, month: Any) -> Tuple[int, int]:
    """Parse year/month path parameters; any failure gives one message."""
    try:
        return validate_year(year), validate_month(month)
    except ValidationError:
        raise ValidationError("Invalid parameters") from None
