"""credstore: in-memory account registration and password login."""

__version__ = "0.1.0"
