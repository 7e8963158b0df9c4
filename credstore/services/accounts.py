"""Account registration and login against the in-memory identity store."""

import logging
from collections.abc import Mapping
from typing import Any

from credstore.core.errors import (
    Authenticated,
    ConflictError,
    Created,
    InternalError,
    InvalidCredentials,
    LoginResult,
    RegisterResult,
    ValidationError,
)
from credstore.core.security import PasswordHasher
from credstore.models.account import Account
from credstore.services.identity_store import EMAIL_EXISTS, USERNAME_EXISTS, IdentityStore
from credstore.services.validation import validate_registration

logger = logging.getLogger(__name__)


class AccountService:
    """
    Registers accounts and verifies logins. Owns its IdentityStore.

    Domain failures are returned, not raised.
    """

    def __init__(
        self,
        store: IdentityStore | None = None,
        hasher: PasswordHasher | None = None,
    ) -> None:
        self.store = store if store is not None else IdentityStore()
        self.hasher = hasher if hasher is not None else PasswordHasher()

    def register(self, data: Mapping[str, Any]) -> RegisterResult:
        """
        Validate, check uniqueness, hash and store a new account.

        Username conflicts are reported before email conflicts. The store is
        only touched by the final insert, which re-checks both constraints
        atomically so concurrent registrations cannot create duplicates.
        """
        try:
            username, email, role, password = validate_registration(data)
        except ValidationError as e:
            logger.info("Registration rejected: %s", e.message)
            return e

        # Fast path: skip the bcrypt work when the conflict is already visible.
        if self.store.find_by_username(username) is not None:
            logger.warning("Registration conflict: username=%s already exists", username)
            return ConflictError("username", USERNAME_EXISTS)
        if self.store.find_by_email(email) is not None:
            logger.warning("Registration conflict: email already exists (username=%s)", username)
            return ConflictError("email", EMAIL_EXISTS)

        try:
            salt = self.hasher.generate_salt()
            password_hash = self.hasher.hash(password, salt)
        except InternalError as e:
            logger.exception("Registration failed while hashing password: username=%s", username)
            return e

        account = Account(
            username=username,
            email=email,
            role=role,
            salt=salt,
            password_hash=password_hash,
        )
        try:
            self.store.insert(account)
        except ConflictError as e:
            logger.warning(
                "Registration conflict on insert: field=%s username=%s", e.field, username
            )
            return e

        logger.info("User registered: username=%s role=%s", username, role.value)
        return Created(username=username)

    def login(self, username: Any, password: Any) -> LoginResult:
        """
        Check a username/password pair. Unknown user and wrong password return
        the same InvalidCredentials so callers cannot probe for usernames.
        """
        if not isinstance(username, str) or not isinstance(password, str):
            logger.info("Login failed: malformed credentials")
            return InvalidCredentials()

        account = self.store.find_by_username(username)
        if account is None:
            # Spend the same bcrypt work as a wrong password before failing.
            try:
                self.hasher.verify(password, self.hasher.dummy_hash())
            except InternalError:
                logger.exception("Dummy hash unavailable for unknown-user login")
            logger.info("Login failed: username=%s", username)
            return InvalidCredentials()
        if not self.hasher.verify(password, account.password_hash):
            logger.info("Login failed: username=%s", username)
            return InvalidCredentials()

        logger.info("Login successful: username=%s", username)
        return Authenticated(username=account.username, role=account.role)
