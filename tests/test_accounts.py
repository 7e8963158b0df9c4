"""Unit tests for credstore.services.accounts: register and login outcomes."""

import threading
import unittest
from unittest.mock import MagicMock

from credstore.core.config import get_settings
from credstore.core.errors import (
    Authenticated,
    ConflictError,
    Created,
    HashingError,
    InternalError,
    InvalidCredentials,
    ValidationError,
)
from credstore.core.security import PasswordHasher
from credstore.models.account import Role
from credstore.services.accounts import AccountService
from credstore.services.identity_store import IdentityStore


def _body(**overrides: object) -> dict:
    """Build a valid registration body, optionally overriding fields."""
    body = {
        "username": "alice",
        "email": "alice@example.com",
        "type": "user",
        "password": "abcdA1!",
    }
    body.update(overrides)
    return body


def _service() -> AccountService:
    """Fresh service with its own store and a cheap bcrypt cost."""
    return AccountService(store=IdentityStore(), hasher=PasswordHasher(rounds=4))


class TestRegister(unittest.TestCase):
    """register validates, enforces uniqueness and stores a hashed password."""

    def setUp(self) -> None:
        self.service = _service()

    def test_creates_account(self) -> None:
        result = self.service.register(_body(type="admin"))
        self.assertEqual(result, Created(username="alice"))

        account = self.service.store.find_by_username("alice")
        self.assertIsNotNone(account)
        self.assertEqual(account.email, "alice@example.com")
        self.assertIs(account.role, Role.ADMIN)
        self.assertNotEqual(account.password_hash, b"abcdA1!")
        self.assertTrue(account.password_hash.startswith(account.salt))
        self.assertTrue(self.service.hasher.verify("abcdA1!", account.password_hash))

    def test_validation_error_leaves_store_unchanged(self) -> None:
        result = self.service.register(_body(username="ab"))
        self.assertIsInstance(result, ValidationError)
        self.assertIn('"username"', result.message)
        self.assertEqual(len(self.service.store), 0)

    def test_invalid_password(self) -> None:
        result = self.service.register(_body(password="abcdefg"))
        self.assertIsInstance(result, ValidationError)
        self.assertTrue(result.message.startswith('"password"'))

    def test_duplicate_username(self) -> None:
        self.assertIsInstance(self.service.register(_body()), Created)
        original = self.service.store.find_by_username("alice")

        result = self.service.register(_body(email="other@example.com"))
        self.assertIsInstance(result, ConflictError)
        self.assertEqual(result.field, "username")
        self.assertEqual(result.message, "Username already exists")
        self.assertEqual(len(self.service.store), 1)
        self.assertIs(self.service.store.find_by_username("alice"), original)

    def test_duplicate_email(self) -> None:
        self.service.register(_body())
        result = self.service.register(_body(username="bob"))
        self.assertIsInstance(result, ConflictError)
        self.assertEqual(result.field, "email")
        self.assertEqual(result.message, "Email already exists")
        self.assertIsNone(self.service.store.find_by_username("bob"))

    def test_username_conflict_reported_before_email(self) -> None:
        self.service.register(_body())
        self.service.register(_body(username="bob", email="bob@example.com"))

        same_account = self.service.register(_body())
        self.assertEqual(same_account.field, "username")

        two_accounts = self.service.register(_body(email="bob@example.com"))
        self.assertEqual(two_accounts.field, "username")

    def test_hashing_failure_is_internal_error(self) -> None:
        hasher = MagicMock()
        hasher.generate_salt.return_value = b"bad"
        hasher.hash.side_effect = HashingError("Password hashing failed: Invalid salt")
        service = AccountService(store=IdentityStore(), hasher=hasher)

        result = service.register(_body())
        self.assertIsInstance(result, InternalError)
        self.assertEqual(len(service.store), 0)
        hasher.hash.assert_called_once_with("abcdA1!", b"bad")

    def test_salt_failure_is_internal_error(self) -> None:
        service = AccountService(store=IdentityStore(), hasher=PasswordHasher(rounds=3))
        result = service.register(_body())
        self.assertIsInstance(result, HashingError)
        self.assertIsInstance(result, InternalError)
        self.assertEqual(len(service.store), 0)

    def test_default_hasher_uses_configured_rounds(self) -> None:
        self.assertEqual(AccountService().hasher.rounds, get_settings().BCRYPT_ROUNDS)

    def test_conflict_skips_hashing(self) -> None:
        self.service.register(_body())
        hasher = MagicMock()
        service = AccountService(store=self.service.store, hasher=hasher)
        service.register(_body(email="x@example.com"))
        hasher.generate_salt.assert_not_called()
        hasher.hash.assert_not_called()


class TestConcurrentRegister(unittest.TestCase):
    """Concurrent registrations for one username: exactly one succeeds."""

    def test_single_winner(self) -> None:
        service = _service()
        workers = 8
        barrier = threading.Barrier(workers)
        results: list[object] = []
        results_lock = threading.Lock()

        def worker(i: int) -> None:
            barrier.wait()
            result = service.register(_body(username="racer", email=f"racer{i}@example.com"))
            with results_lock:
                results.append(result)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        created = [r for r in results if isinstance(r, Created)]
        conflicts = [r for r in results if isinstance(r, ConflictError)]
        self.assertEqual(len(created), 1)
        self.assertEqual(len(conflicts), workers - 1)
        self.assertTrue(all(c.field == "username" for c in conflicts))
        self.assertEqual(len(service.store), 1)

    def test_same_email_single_winner(self) -> None:
        service = _service()
        workers = 8
        barrier = threading.Barrier(workers)
        results: list[object] = []
        results_lock = threading.Lock()

        def worker(i: int) -> None:
            barrier.wait()
            result = service.register(_body(username=f"racer{i}", email="shared@example.com"))
            with results_lock:
                results.append(result)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(sum(isinstance(r, Created) for r in results), 1)
        self.assertEqual(len(service.store), 1)


class TestLogin(unittest.TestCase):
    """login succeeds only on an exact username/password match."""

    def setUp(self) -> None:
        self.service = _service()
        self.service.register(_body(type="admin"))

    def test_correct_credentials(self) -> None:
        result = self.service.login("alice", "abcdA1!")
        self.assertEqual(result, Authenticated(username="alice", role=Role.ADMIN))

    def test_wrong_password(self) -> None:
        result = self.service.login("alice", "abcdA1?")
        self.assertIsInstance(result, InvalidCredentials)

    def test_unknown_user_same_shape_as_wrong_password(self) -> None:
        unknown = self.service.login("mallory", "abcdA1!")
        wrong = self.service.login("alice", "wrong")
        self.assertIsInstance(unknown, InvalidCredentials)
        self.assertIs(type(unknown), type(wrong))
        self.assertEqual(unknown.message, wrong.message)
        self.assertEqual(unknown.message, "Invalid username or password")

    def test_unknown_user_still_runs_bcrypt(self) -> None:
        hasher = MagicMock()
        hasher.dummy_hash.return_value = b"dummy"
        hasher.verify.return_value = False
        service = AccountService(store=self.service.store, hasher=hasher)

        result = service.login("mallory", "abcdA1!")
        self.assertIsInstance(result, InvalidCredentials)
        hasher.verify.assert_called_once_with("abcdA1!", b"dummy")

    def test_malformed_credentials(self) -> None:
        self.assertIsInstance(self.service.login(None, "abcdA1!"), InvalidCredentials)
        self.assertIsInstance(self.service.login("alice", None), InvalidCredentials)
        self.assertIsInstance(self.service.login(["alice"], 123), InvalidCredentials)


if __name__ == "__main__":
    unittest.main()
