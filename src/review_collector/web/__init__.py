"""Web package for the review collector."""

from .app import ReviewCollectorApp, create_app

__all__ = ["ReviewCollectorApp", "create_app"]
