"""In-memory account entity (identity store record)."""

from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
    """Account role chosen at registration."""

    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class Account:
    """
    Registered user account. Immutable once created.

    password_hash is a bcrypt digest that embeds its salt; the plaintext
    password is never stored.
    """

    username: str
    email: str
    role: Role
    salt: bytes = field(repr=False)
    password_hash: bytes = field(repr=False)
