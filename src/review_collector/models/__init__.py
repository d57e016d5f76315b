"""Models package for the review collector."""

from .product import MAX_RATING, MIN_RATING, PLATFORMS, Product, Review

__all__ = ["Product", "Review", "PLATFORMS", "MIN_RATING", "MAX_RATING"]
