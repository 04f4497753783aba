"""Task list query and keyset pagination service."""

__version__ = "0.1.0"
