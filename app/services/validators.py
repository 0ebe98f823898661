"""Field validators shared by every schema that carries the same kind of field."""

from decimal import Decimal

NAME_MAX_LEN = 255
UNIT_MAX_LEN = 32
PHONE_MAX_LEN = 64
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128


def clean_name(value: str, max_len: int = NAME_MAX_LEN) -> str:
    """Trim; must be non-empty and at most max_len characters."""
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    if len(value) > max_len:
        raise ValueError(f"must be at most {max_len} characters")
    return value


def clean_optional_text(value: str | None) -> str | None:
    """Trim; blank strings become None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def normalize_email(value: str) -> str:
    """Emails are compared case-insensitively, so they are stored lower-cased."""
    return value.strip().lower()


def check_password(value: str) -> str:
    if not (PASSWORD_MIN_LEN <= len(value) <= PASSWORD_MAX_LEN):
        raise ValueError(
            f"must be between {PASSWORD_MIN_LEN} and {PASSWORD_MAX_LEN} characters"
        )
    return value


def check_non_negative(value: Decimal) -> Decimal:
    if value < 0:
        raise ValueError("must not be negative")
    return value


def check_positive(value):
    if value <= 0:
        raise ValueError("must be greater than zero")
    return value
