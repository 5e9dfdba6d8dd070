"""Persistence-layer exceptions."""


class StorageError(RuntimeError):
    """Raised when a write or read against the database fails unrecoverably."""
