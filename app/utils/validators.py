"""Validation utilities"""

import re

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
OBJECT_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def validate_email(email: str) -> bool:
    """Validate email format"""
    return bool(EMAIL_PATTERN.fullmatch(email))


def is_valid_object_id(value: str) -> bool:
    """Check that a path or token identifier has the record id shape"""
    return bool(OBJECT_ID_PATTERN.fullmatch(value))


def is_strict_int(value) -> bool:
    """True for JSON integers; bools and floats don't count"""
    return isinstance(value, int) and not isinstance(value, bool)


def escape_like(value: str) -> str:
    """Escape SQL LIKE wildcards so the value matches literally (escape char: backslash)"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
