import re
from typing import Any, Dict, List

REQUIRED_STR_FIELDS = ["location_id"]
OPTIONAL_STR_FIELDS = [
    "first_name",
    "last_name",
    "email",
    "phone_number",
]

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_PHONE_ALLOWED_RE = re.compile(r"^\+?[0-9 ().\-]+$")


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _valid_email(v: str) -> bool:
    return bool(_EMAIL_RE.match(v.strip()))


def _valid_phone(v: str) -> bool:
    if not _PHONE_ALLOWED_RE.match(v.strip()):
        return False
    digits = sum(ch.isdigit() for ch in v)
    return 7 <= digits <= 15


def validate_contact(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    """
    errors: List[str] = []

    for f in REQUIRED_STR_FIELDS:
        if data.get(f) is None:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    # Optional strings: None is allowed, anything else must be a string
    for f in OPTIONAL_STR_FIELDS:
        if data.get(f) is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    if _is_non_empty_str(data.get("email")) and not _valid_email(data["email"]):
        errors.append("Field 'email' must be a valid email address")

    if _is_non_empty_str(data.get("phone_number")) and not _valid_phone(data["phone_number"]):
        errors.append("Field 'phone_number' must contain 7-15 digits")

    return errors
