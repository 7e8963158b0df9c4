"""Core app configuration, errors and password hashing."""

from credstore.core.config import get_settings, settings
from credstore.core.security import PasswordHasher

__all__ = ["get_settings", "settings", "PasswordHasher"]
