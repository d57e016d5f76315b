"""Test configuration and fixtures."""

import pytest

from review_collector.database.manager import DatabaseManager
from review_collector.models.product import Product, Review
from review_collector.services.catalog import CatalogService


@pytest.fixture
def sample_config(tmp_path):
    """Provide sample configuration for tests."""
    return {
        "database": {"path": str(tmp_path / "test_review_collector.db")},
        "flask": {"SECRET_KEY": "test-secret", "TESTING": True},
        "catalog": {"recompute_on_write": False},
    }


@pytest.fixture
def db_manager(sample_config):
    """Store handle backed by a temporary SQLite file."""
    return DatabaseManager(sample_config["database"]["path"])


@pytest.fixture
def catalog(db_manager, sample_config):
    """Catalog service over the temporary store."""
    return CatalogService(db_manager, sample_config)


@pytest.fixture
def sample_product():
    """Provide a sample product for tests."""
    return Product(
        name="iPhone 15 Pro Max 256GB",
        url="https://shopee.co.id/iphone-15-pro-max-i.123.456",
        platform="shopee",
        price="Rp 21.999.000",
        image_url="https://cf.shopee.co.id/file/iphone15.jpg",
    )


@pytest.fixture
def make_review():
    """Factory for reviews of a given product."""

    def _make_review(product_id="product-1", rating=5, reviewer_name="Budi", comment="Mantap"):
        return Review(
            product_id=product_id,
            reviewer_name=reviewer_name,
            rating=rating,
            comment=comment,
        )

    return _make_review
