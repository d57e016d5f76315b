"""Services package for the review collector."""

from .catalog import CatalogService, ProductDetail, ProductNotFoundError

__all__ = ["CatalogService", "ProductDetail", "ProductNotFoundError"]
