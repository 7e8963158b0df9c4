"""In-memory identity store: accounts keyed by username."""

import threading

from credstore.core.errors import ConflictError
from credstore.models.account import Account

USERNAME_EXISTS = "Username already exists"
EMAIL_EXISTS = "Email already exists"


class IdentityStore:
    """
    Process-local account registry. Nothing is persisted.

    All access goes through one lock so that insert() can re-check both
    uniqueness constraints and write in a single critical section.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._accounts: dict[str, Account] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)

    def find_by_username(self, username: str) -> Account | None:
        with self._lock:
            return self._accounts.get(username)

    def find_by_email(self, email: str) -> Account | None:
        # Linear scan; emails are not indexed.
        with self._lock:
            for account in self._accounts.values():
                if account.email == email:
                    return account
            return None

    def insert(self, account: Account) -> None:
        """
        Add a new account. Username is checked before email, so a request that
        collides on both always reports the username.
        Raises ConflictError if either is already taken.
        """
        with self._lock:
            if self.find_by_username(account.username) is not None:
                raise ConflictError("username", USERNAME_EXISTS)
            if self.find_by_email(account.email) is not None:
                raise ConflictError("email", EMAIL_EXISTS)
            self._accounts[account.username] = account
