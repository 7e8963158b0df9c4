"""Password hashing and verification for stored credentials."""

import logging

import bcrypt

from credstore.core.config import get_settings
from credstore.core.errors import HashingError

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password.
BCRYPT_MAX_PASSWORD_BYTES = 72

# Hashed once per hasher and checked on unknown-user logins so they cost the same as a wrong password.
_DUMMY_PASSWORD = "credstore-unknown-user"


def _encode(password: str) -> bytes:
    # Truncate to avoid errors on newer bcrypt (validation already limits length).
    return password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


class PasswordHasher:
    """Salted bcrypt hashing. Cost factor is fixed per instance."""

    def __init__(self, rounds: int | None = None) -> None:
        self.rounds = rounds if rounds is not None else get_settings().BCRYPT_ROUNDS
        self._dummy_hash: bytes | None = None

    def generate_salt(self) -> bytes:
        """
        Return a fresh random salt (encodes the cost factor, e.g. b"$2b$10$...").
        Raises HashingError if bcrypt rejects the cost factor.
        """
        try:
            return bcrypt.gensalt(rounds=self.rounds)
        except (ValueError, TypeError) as e:
            raise HashingError(f"Salt generation failed: {e}") from e

    def hash(self, password: str, salt: bytes) -> bytes:
        """
        Hash a plain-text password with the given salt. Deterministic for the
        same (password, salt); the result embeds the salt.
        Raises HashingError if bcrypt rejects the salt.
        """
        try:
            return bcrypt.hashpw(_encode(password), salt)
        except (ValueError, TypeError) as e:
            raise HashingError(f"Password hashing failed: {e}") from e

    def verify(self, password: str, stored: bytes) -> bool:
        """Verify a plain password against a stored hash (constant-time compare)."""
        try:
            return bcrypt.checkpw(_encode(password), stored)
        except (ValueError, TypeError) as e:
            logger.warning("Password verification rejected by bcrypt: %s", e)
            return False

    def dummy_hash(self) -> bytes:
        """Hash at this instance's cost with no matching account; built on first use."""
        if self._dummy_hash is None:
            self._dummy_hash = self.hash(_DUMMY_PASSWORD, self.generate_salt())
        return self._dummy_hash
