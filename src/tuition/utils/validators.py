"""Data validation helpers.

Functions:
- validate_email(email) -> bool: Loose format check for login input
- normalize_email(email) -> str: Canonical form used for lookups
- mask_email(email) -> str: Redacted form safe for logs
"""

import re

# Email validation pattern
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$")


def validate_email(email: str) -> bool:
    """Validate email format.

    Args:
        email: Email address to validate

    Returns:
        True if the trimmed address looks like an email, False otherwise
    """
    return bool(EMAIL_PATTERN.match(email.strip()))


def normalize_email(email: str) -> str:
    """Trim and lowercase an email for equality lookups."""
    return email.strip().lower()


def mask_email(email: str) -> str:
    """Mask the local part of an email for logging.

    Examples:
        "alice@example.com" -> "a***@example.com"
        "" -> ""
    """
    email = email.strip()
    if not email:
        return ""
    local, sep, domain = email.partition("@")
    if not sep:
        return local[:1] + "***"
    return f"{local[:1]}***@{domain}"
