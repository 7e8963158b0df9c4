"""Registration field validation.

Each field has its own validator; validate_registration() runs them in field
order and reports the first failure. Messages name the field and the rule,
and never echo the submitted password.
"""

import re
from collections.abc import Callable, Mapping
from typing import Any

from credstore.core.errors import ValidationError
from credstore.models.account import Role

USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 24
PASSWORD_MIN_LEN = 5
PASSWORD_MAX_LEN = 24
PASSWORD_SPECIAL_CHARS = "@$!%*?&"

REGISTRATION_FIELDS = ("username", "email", "type", "password")

# local@domain.tld: dot-atom local part (no leading, trailing or doubled dots),
# dotted domain, alphabetic TLD.
_EMAIL_RE = re.compile(
    r"[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@(?:[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+"
    r"[A-Za-z]{2,63}"
)

_ALLOWED_PASSWORD_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyz"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "0123456789" + PASSWORD_SPECIAL_CHARS
)


def _is_lower(c: str) -> bool:
    return "a" <= c <= "z"


def _is_upper(c: str) -> bool:
    return "A" <= c <= "Z"


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _is_special(c: str) -> bool:
    return c in PASSWORD_SPECIAL_CHARS


# Ordered password rules after the length check: (predicate over whole password, message).
PASSWORD_RULES: list[tuple[Callable[[str], bool], str]] = [
    (lambda p: any(_is_lower(c) for c in p), "must contain at least one lowercase letter"),
    (lambda p: any(_is_upper(c) for c in p), "must contain at least one uppercase letter"),
    (lambda p: any(_is_digit(c) for c in p), "must contain at least one digit"),
    (
        lambda p: any(_is_special(c) for c in p),
        f"must contain at least one special character ({PASSWORD_SPECIAL_CHARS})",
    ),
    (
        lambda p: all(c in _ALLOWED_PASSWORD_CHARS for c in p),
        f"may only contain letters, digits and {PASSWORD_SPECIAL_CHARS}",
    ),
]


def _require_string(name: str, value: Any) -> str:
    if value is None:
        raise ValidationError(f'"{name}" is required')
    if not isinstance(value, str):
        raise ValidationError(f'"{name}" must be a string')
    if value == "":
        raise ValidationError(f'"{name}" is not allowed to be empty')
    return value


def _check_length(name: str, value: str, min_len: int, max_len: int) -> None:
    if len(value) < min_len:
        raise ValidationError(
            f'"{name}" length must be at least {min_len} characters long'
        )
    if len(value) > max_len:
        raise ValidationError(
            f'"{name}" length must be less than or equal to {max_len} characters long'
        )


def validate_username(value: Any) -> str:
    username = _require_string("username", value)
    _check_length("username", username, USERNAME_MIN_LEN, USERNAME_MAX_LEN)
    return username


def validate_email(value: Any) -> str:
    email = _require_string("email", value)
    if not _EMAIL_RE.fullmatch(email):
        raise ValidationError('"email" must be a valid email')
    return email


def validate_role(value: Any) -> Role:
    role = _require_string("type", value)
    try:
        return Role(role)
    except ValueError:
        allowed = ", ".join(r.value for r in Role)
        raise ValidationError(f'"type" must be one of [{allowed}]') from None


def validate_password(value: Any) -> str:
    password = _require_string("password", value)
    _check_length("password", password, PASSWORD_MIN_LEN, PASSWORD_MAX_LEN)
    for predicate, message in PASSWORD_RULES:
        if not predicate(password):
            raise ValidationError(f'"password" {message}')
    return password


def validate_registration(data: Any) -> tuple[str, str, Role, str]:
    """
    Validate a registration body. Returns (username, email, role, password).
    Raises ValidationError for the first failing rule.
    """
    if data is None:
        raise ValidationError('"value" is required')
    if not isinstance(data, Mapping):
        raise ValidationError('"value" must be of type object')
    username = validate_username(data.get("username"))
    email = validate_email(data.get("email"))
    role = validate_role(data.get("type"))
    password = validate_password(data.get("password"))
    for key in data:
        if key not in REGISTRATION_FIELDS:
            raise ValidationError(f'"{key}" is not allowed')
    return username, email, role, password
