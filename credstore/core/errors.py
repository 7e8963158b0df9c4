"""Result and error kinds returned by the account service.

Domain errors are exceptions so the store can raise them internally, but the
service hands them back as values; the HTTP adapter never sees them raised.
"""

from dataclasses import dataclass

from credstore.models.account import Role


class AccountError(Exception):
    """Base class for account operation failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AccountError):
    """A registration field failed a format, range or pattern rule."""


class ConflictError(AccountError):
    """Username or email is already registered."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class InvalidCredentials(AccountError):
    """Login failed. Does not say whether the user exists."""

    def __init__(self) -> None:
        super().__init__("Invalid username or password")


class InternalError(AccountError):
    """Unexpected failure (hashing, store fault); surfaced as an opaque error."""


class HashingError(InternalError):
    """bcrypt rejected its input (e.g. a malformed salt)."""


@dataclass(frozen=True)
class Created:
    username: str


@dataclass(frozen=True)
class Authenticated:
    username: str
    role: Role


RegisterResult = Created | ValidationError | ConflictError | InternalError
LoginResult = Authenticated | InvalidCredentials
