"""
Review Collector

Collects e-commerce product listings and their customer reviews, with
aggregate rating statistics per product and across a dashboard.
"""

__version__ = "1.0.0"

from .database.manager import DatabaseManager, StoreError
from .models.product import Product, Review
from .services.catalog import CatalogService

__all__ = ["Product", "Review", "CatalogService", "DatabaseManager", "StoreError"]
