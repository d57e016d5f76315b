"""Database package for the review collector."""

from .manager import DatabaseManager, StoreError

__all__ = ["DatabaseManager", "StoreError"]
