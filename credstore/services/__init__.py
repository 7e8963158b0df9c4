"""Account services: validation, identity store and registration/login."""

from credstore.services.accounts import AccountService
from credstore.services.identity_store import IdentityStore

__all__ = ["AccountService", "IdentityStore"]
