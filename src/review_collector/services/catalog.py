"""
Catalog service: the operations behind the entry, dashboard and detail screens.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..analysis.ratings import (
    ALL_PLATFORMS,
    HistogramBar,
    RatingAggregate,
    compute_aggregate,
    dashboard_view,
    rating_histogram,
)
from ..database.manager import DatabaseManager, StoreError
from ..models.product import Product, Review
from ..utils.helpers import identify_platform, validate_url

logger = logging.getLogger(__name__)


class ProductNotFoundError(LookupError):
    """Raised when an operation targets a product that does not exist."""


@dataclass
class ProductDetail:
    """A product with its reviews and rating histogram."""

    product: Product
    reviews: List[Review] = field(default_factory=list)
    histogram: List[HistogramBar] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product": self.product.to_dict(),
            "reviews": [review.to_dict() for review in self.reviews],
            "rating_distribution": [
                {"rating": bar.rating, "count": bar.count, "width": bar.width}
                for bar in self.histogram
            ],
        }


class CatalogService:
    """
    Coordinates catalog operations over an injected store handle.

    Aggregate ratings are recomputed whenever a product is loaded
    (recompute-on-read). With ``catalog.recompute_on_write`` enabled they are
    also recomputed right after a review is added.
    """

    def __init__(self, db_manager: DatabaseManager, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the service.

        Args:
            db_manager: Store handle shared with the rest of the process
            config: Configuration dictionary with catalog settings
        """
        self.db_manager = db_manager
        self.config = self._get_default_config()
        self.config.update((config or {}).get("catalog", {}))

        logger.info(
            f"Catalog service initialized (recompute_on_write={self.recompute_on_write})"
        )

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default catalog settings."""
        return {"recompute_on_write": False}

    @property
    def recompute_on_write(self) -> bool:
        return bool(self.config.get("recompute_on_write"))

    def create_product(
        self,
        name: str,
        url: str,
        platform: str,
        price: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> Product:
        """
        Create a product listing.

        Raises:
            ValueError: If the submitted attributes are invalid
            StoreError: If the product could not be stored
        """
        if not validate_url(url):
            raise ValueError(f"Invalid product URL: {url!r}")

        if image_url and not validate_url(image_url):
            raise ValueError(f"Invalid image URL: {image_url!r}")

        product = Product(name=name, url=url, platform=platform, price=price, image_url=image_url)

        detected = identify_platform(product.url)
        if detected and detected != product.platform:
            logger.warning(
                f"URL {product.url} looks like a {detected} listing but platform is "
                f"{product.platform}"
            )

        return self.db_manager.create_product(product)

    def recompute_aggregate(
        self, product_id: str, reviews: Optional[List[Review]] = None
    ) -> RatingAggregate:
        """
        Recompute a product's average rating and review count and store them.

        Args:
            product_id: Product to recompute
            reviews: Already-loaded reviews of the product, fetched if omitted

        Returns:
            The stored aggregate
        """
        if reviews is None:
            reviews = self.db_manager.list_reviews(product_id)

        aggregate = compute_aggregate(reviews)
        self.db_manager.update_product_aggregates(
            product_id, aggregate.average_rating, aggregate.total_reviews
        )

        logger.debug(
            f"Recomputed product {product_id}: average={aggregate.average_rating:.3f} "
            f"total={aggregate.total_reviews}"
        )
        return aggregate

    def load_product(self, product_id: str) -> Optional[ProductDetail]:
        """
        Load a product with its reviews, refreshing its stored aggregate.

        A failed recompute keeps the previously stored rating.

        Raises:
            StoreError: If the product or its reviews could not be fetched

        Returns:
            The product detail, or None if the product does not exist
        """
        try:
            product = self.db_manager.get_product(product_id)
            reviews = self.db_manager.list_reviews(product_id)
        except StoreError as e:
            logger.error(f"Error loading product {product_id}: {e}")
            raise

        if product is None:
            logger.info(f"Product {product_id} not found")
            return None

        try:
            aggregate = self.recompute_aggregate(product_id, reviews)
        except StoreError as e:
            logger.error(f"Error updating rating of product {product_id}: {e}")
        else:
            product.average_rating = aggregate.average_rating
            product.total_reviews = aggregate.total_reviews

        return ProductDetail(product=product, reviews=reviews, histogram=rating_histogram(reviews))

    def add_review(
        self,
        product_id: str,
        reviewer_name: str,
        rating: int,
        comment: str,
    ) -> Optional[Review]:
        """
        Attach a review to a product.

        Store failures are logged and swallowed.

        Raises:
            ValueError: If the review is invalid
            ProductNotFoundError: If the product does not exist

        Returns:
            The stored review, or None if it could not be stored
        """
        review = Review(
            product_id=product_id, reviewer_name=reviewer_name, rating=rating, comment=comment
        )

        try:
            if self.db_manager.get_product(product_id) is None:
                raise ProductNotFoundError(product_id)

            stored = self.db_manager.add_review(review)
        except StoreError as e:
            logger.error(f"Error adding review to product {product_id}: {e}")
            return None

        if self.recompute_on_write:
            try:
                self.recompute_aggregate(product_id)
            except StoreError as e:
                logger.error(f"Error updating rating of product {product_id}: {e}")

        return stored

    def load_dashboard(
        self, platform: str = ALL_PLATFORMS, raise_errors: bool = False
    ) -> Dict[str, Any]:
        """
        Products, filtered by platform, with summary statistics.

        A failed load is logged and yields an empty dashboard, unless
        ``raise_errors`` is set, in which case the StoreError propagates.
        """
        try:
            products = self.db_manager.list_products()
        except StoreError as e:
            logger.error(f"Error loading products: {e}")
            if raise_errors:
                raise
            products = []

        return dashboard_view(products, platform)

    def get_statistics(self) -> Dict[str, Any]:
        """Get store-level catalog statistics."""
        return self.db_manager.get_statistics()

    def export_catalog(self, output_file: str = "exports/catalog_export.json") -> int:
        """
        Export the catalog to a JSON file.

        Returns:
            Number of products exported
        """
        return self.db_manager.export_to_json(output_file)

    def health_check(self) -> Dict[str, bool]:
        """
        Perform a health check on the backing store.

        Returns:
            Dictionary with health status of each component
        """
        health_status = {}

        try:
            self.db_manager.get_statistics()
            health_status["database"] = True
        except StoreError as e:
            logger.error(f"Database health check failed: {e}")
            health_status["database"] = False

        return health_status
