"""Database configuration and utilities."""

from .errors import StorageError
from .session import SessionLocal, get_db

__all__ = ["get_db", "SessionLocal", "StorageError"]
