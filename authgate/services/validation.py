"""Email and password format checks."""

import re

# local@domain.tld - no whitespace, a single "@", at least one dot in the domain.
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_PASSWORD_LENGTH = 8


def validate_email(value: str) -> bool:
    """Return True if the value looks like an email address. No DNS lookups."""
    if not isinstance(value, str):
        return False
    return EMAIL_PATTERN.fullmatch(value) is not None


def validate_password(value: str) -> bool:
    """Return True if the password has 8+ characters, a letter and an ASCII digit."""
    if not isinstance(value, str) or len(value) < MIN_PASSWORD_LENGTH:
        return False
    has_letter = any(ch.isalpha() for ch in value)
    has_digit = any("0" <= ch <= "9" for ch in value)
    return has_letter and has_digit


class InputValidator:
    """Stateless validator handed to the auth service."""

    def validate_email(self, value: str) -> bool:
        return validate_email(value)

    def validate_password(self, value: str) -> bool:
        return validate_password(value)
