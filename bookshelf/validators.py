"""Validation of ISBNs and user input."""
import re
from typing import List

from email_validator import validate_email, EmailNotValidError

from bookshelf.exceptions import ValidationError

_NON_DIGITS = re.compile(r"[^0-9]")

MIN_PASSWORD_LENGTH = 8


def normalize_isbn(raw: str) -> str:
    """
    Reduce an ISBN to its decimal digits.

    Hyphens, spaces and any other character (including an ISBN-10 'X'
    check character) are dropped.
    """
    if not isinstance(raw, str):
        return ""
    return _NON_DIGITS.sub("", raw)


def is_valid_isbn(raw: str) -> bool:
    """
    Validate an ISBN-10 or ISBN-13 check digit.

    Args:
        raw: ISBN as typed, with or without separators

    Returns:
        True if the extracted digits form a valid ISBN-10 or ISBN-13
    """
    digits = normalize_isbn(raw)
    if len(digits) == 10:
        return _is_valid_isbn10(digits)
    if len(digits) == 13:
        return _is_valid_isbn13(digits)
    return False


def _is_valid_isbn10(digits: str) -> bool:
    total = sum(int(ch) * (10 - i) for i, ch in enumerate(digits))
    return total % 11 == 0


def _is_valid_isbn13(digits: str) -> bool:
    total = sum(int(ch) * (1 if i % 2 == 0 else 3) for i, ch in enumerate(digits))
    return total % 10 == 0


def normalize_email(raw: str) -> str:
    """
    Validate an email address and return its canonical lowercase form.

    Raises:
        ValidationError: If the address is not well formed
    """
    try:
        result = validate_email((raw or "").strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError(f"Invalid email address: {e}") from e
    return result.normalized.lower()


def is_valid_name(name: str) -> bool:
    """Names are non-empty and made of letters, spaces and hyphens."""
    name = (name or "").strip()
    return bool(name) and all(c.isalpha() or c.isspace() or c == "-" for c in name)


def password_problems(password: str) -> List[str]:
    """
    List the strength rules a password breaks.

    Args:
        password: Candidate password

    Returns:
        Human readable rule descriptions, empty when the password is acceptable
    """
    problems = []
    if len(password) < MIN_PASSWORD_LENGTH:
        problems.append(f"at least {MIN_PASSWORD_LENGTH} characters")
    if not any(c.isupper() for c in password):
        problems.append("an uppercase letter")
    if not any(c.islower() for c in password):
        problems.append("a lowercase letter")
    if not any(c.isdigit() for c in password):
        problems.append("a number")
    if not any(not c.isalnum() for c in password):
        problems.append("a special character")
    return problems
