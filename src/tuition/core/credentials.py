"""Credential hashing and student login checks.

Passwords are stored in the students tab as PBKDF2-SHA256 hashes:

    pbkdf2_sha256$<rounds>$<salt_hex>$<digest_hex>

Plaintext password columns are not accepted. Use ``tuition hash-password``
to produce the value for a student's ``password_hash`` cell.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from typing import Iterable

import structlog

from tuition.core.records import Student
from tuition.utils.validators import mask_email, normalize_email

logger = structlog.get_logger(__name__)

HASH_ALGORITHM = "pbkdf2_sha256"
DEFAULT_ROUNDS = 260000
SALT_BYTES = 16


class InvalidCredentials(Exception):
    """Raised when an email/password pair does not match any student.

    Deliberately does not say whether the email or the password was wrong.
    """

    def __init__(self):
        super().__init__("Invalid credentials")


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password for storage in the spreadsheet.

    Args:
        password: Plaintext password
        rounds: PBKDF2 iteration count. Defaults to DEFAULT_ROUNDS

    Returns:
        Encoded hash string ``pbkdf2_sha256$rounds$salt$digest``
    """
    rounds = rounds or DEFAULT_ROUNDS
    salt = secrets.token_hex(SALT_BYTES)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), bytes.fromhex(salt), rounds
    )
    return f"{HASH_ALGORITHM}${rounds}${salt}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    """Check a password against an encoded hash in constant time.

    Malformed or unsupported hashes never match.
    """
    parts = (encoded or "").strip().split("$")
    if len(parts) != 4 or parts[0] != HASH_ALGORITHM:
        return False

    _, rounds_text, salt, expected = parts
    try:
        rounds = int(rounds_text)
        salt_bytes = bytes.fromhex(salt)
    except ValueError:
        return False
    if rounds <= 0:
        return False

    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt_bytes, rounds)
    return hmac.compare_digest(digest.hex(), expected.lower())


def authenticate(students: Iterable[Student], email: str, password: str) -> Student:
    """Find the student matching an email/password pair.

    Emails are compared trimmed and case-insensitively.

    Args:
        students: Candidate students (usually the whole students tab)
        email: Login email
        password: Login password

    Returns:
        The matching Student

    Raises:
        InvalidCredentials: If no student matches
    """
    wanted = normalize_email(email or "")
    if wanted and password:
        for student in students:
            if normalize_email(student.student_email) != wanted:
                continue
            if verify_password(password, student.password_hash):
                logger.info("login_succeeded", student_id=student.student_id)
                return student
            break

    logger.info("login_failed", email=mask_email(email or ""))
    raise InvalidCredentials()
