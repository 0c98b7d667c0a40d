"""Input sanitization and validation utilities."""

import re

import bleach


# Maximum lengths for different field types
MAX_LENGTHS = {
    "username": 50,
    "name": 100,
    "email": 255,
    "default": 255,
}

PATTERNS = {
    "username": re.compile(r"^[A-Za-z0-9._-]+$"),
    "email": re.compile(r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"),
}


def sanitize_string(value: str, max_length: int = MAX_LENGTHS["default"]) -> str:
    """
    Sanitize a string input.

    - Strips leading/trailing whitespace
    - Removes HTML tags
    - Collapses internal whitespace
    - Truncates to max length
    """
    if not value:
        return ""

    value = bleach.clean(value.strip(), tags=[], strip=True)
    value = " ".join(value.split())
    return value[:max_length]


def sanitize_name(value: str) -> str:
    """Sanitize a person's first or last name."""
    return sanitize_string(value, max_length=MAX_LENGTHS["name"])


def sanitize_email(value: str) -> str:
    # Not passed through bleach: "&" and friends are legal in the local part
    if not value:
        return ""
    return value.strip().lower()[:MAX_LENGTHS["email"]]


def validate_email(value: str) -> bool:
    """Validate email format."""
    if not value or len(value) > MAX_LENGTHS["email"]:
        return False
    return bool(PATTERNS["email"].match(value))


def validate_username(value: str) -> bool:
    """Usernames are 3-50 characters of letters, digits, dot, dash or underscore."""
    if not value or len(value) < 3 or len(value) > MAX_LENGTHS["username"]:
        return False
    return bool(PATTERNS["username"].match(value))
