"""Domain models."""

from credstore.models.account import Account, Role

__all__ = ["Account", "Role"]
