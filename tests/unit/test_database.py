"""
Unit tests for the database manager.
"""

import json

import pytest

from review_collector.database.manager import DatabaseManager, StoreError
from review_collector.models.product import Product, Review


class TestDatabaseManager:
    """Test cases for database operations."""

    def test_database_initialization(self, tmp_path):
        """Test database initialization creates the file and tables."""
        db_path = tmp_path / "nested" / "catalog.db"
        db_manager = DatabaseManager(str(db_path))

        assert db_path.exists()
        assert db_manager.select_all("products") == []
        assert db_manager.select_all("reviews") == []

    def test_create_and_get_product(self, db_manager, sample_product):
        stored = db_manager.create_product(sample_product)

        assert stored == sample_product
        assert db_manager.get_product(sample_product.id) == sample_product

    def test_get_missing_product(self, db_manager):
        assert db_manager.get_product("missing") is None

    def test_list_products_newest_first(self, db_manager):
        older = Product(
            name="Lama",
            url="https://shopee.co.id/lama",
            platform="shopee",
            created_at="2024-01-01T00:00:00+00:00",
        )
        newer = Product(
            name="Baru",
            url="https://shopee.co.id/baru",
            platform="shopee",
            created_at="2024-02-01T00:00:00+00:00",
        )
        db_manager.create_product(older)
        db_manager.create_product(newer)

        assert [p.name for p in db_manager.list_products()] == ["Baru", "Lama"]

    def test_add_and_list_reviews(self, db_manager, sample_product):
        db_manager.create_product(sample_product)
        first = Review(
            product_id=sample_product.id,
            reviewer_name="Ani",
            rating=4,
            comment="Bagus",
            created_at="2024-01-01T00:00:00+00:00",
        )
        second = Review(
            product_id=sample_product.id,
            reviewer_name="Budi",
            rating=5,
            comment="Mantap",
            created_at="2024-01-02T00:00:00+00:00",
        )
        db_manager.add_review(first)
        db_manager.add_review(second)

        reviews = db_manager.list_reviews(sample_product.id)
        assert [r.reviewer_name for r in reviews] == ["Budi", "Ani"]
        assert db_manager.list_reviews("other-product") == []

    def test_review_for_missing_product(self, db_manager, make_review):
        """Reviews must reference an existing product."""
        with pytest.raises(StoreError):
            db_manager.add_review(make_review(product_id="missing"))

    def test_update_product_aggregates(self, db_manager, sample_product):
        db_manager.create_product(sample_product)

        updated_at = db_manager.update_product_aggregates(sample_product.id, 4.5, 2)

        stored = db_manager.get_product(sample_product.id)
        assert stored.average_rating == 4.5
        assert stored.total_reviews == 2
        assert stored.updated_at == updated_at
        assert stored.created_at == sample_product.created_at

    def test_update_where_rowcount(self, db_manager, sample_product):
        db_manager.create_product(sample_product)

        assert db_manager.update_where("products", {"price": "Rp 1"}, "id", sample_product.id) == 1
        assert db_manager.update_where("products", {"price": "Rp 1"}, "id", "missing") == 0
        assert db_manager.update_where("products", {}, "id", sample_product.id) == 0

    def test_select_where_filters_by_equality(self, db_manager):
        db_manager.create_product(Product(name="A", url="https://shopee.co.id/a", platform="shopee"))
        db_manager.create_product(
            Product(name="B", url="https://tokopedia.com/b", platform="tokopedia")
        )

        rows = db_manager.select_where("products", "platform", "tokopedia")
        assert [row["name"] for row in rows] == ["B"]

    def test_unknown_table_or_column(self, db_manager):
        """Identifiers outside the schema are rejected."""
        with pytest.raises(StoreError, match="Unknown table"):
            db_manager.select_all("users")

        with pytest.raises(StoreError, match="Unknown column"):
            db_manager.select_where("products", "name; DROP TABLE products", "x")

        with pytest.raises(StoreError, match="Unknown column"):
            db_manager.update_where("products", {"secret": 1}, "id", "x")

    def test_insert_requires_id(self, db_manager):
        with pytest.raises(StoreError, match="must carry an id"):
            db_manager.insert_returning("products", {"name": "A"})

    def test_constraint_violation_becomes_store_error(self, db_manager):
        with pytest.raises(StoreError):
            db_manager.insert_returning("products", {"id": "x", "name": "A"})

    def test_get_statistics(self, db_manager, sample_product):
        db_manager.create_product(sample_product)
        for rating in (5, 5, 3):
            db_manager.add_review(
                Review(product_id=sample_product.id, reviewer_name="Ani", rating=rating, comment="Ok")
            )

        stats = db_manager.get_statistics()
        assert stats["total_products"] == 1
        assert stats["total_reviews"] == 3
        assert stats["by_platform"] == {"shopee": 1}
        assert stats["by_rating"] == {3: 1, 5: 2}

    def test_export_to_json(self, db_manager, sample_product, tmp_path):
        """Test exporting products with their reviews."""
        db_manager.create_product(sample_product)
        db_manager.add_review(
            Review(product_id=sample_product.id, reviewer_name="Ani", rating=4, comment="Bagus")
        )

        export_file = tmp_path / "exports" / "catalog.json"
        count = db_manager.export_to_json(str(export_file))

        assert count == 1
        with open(export_file, "r", encoding="utf-8") as f:
            exported = json.load(f)

        assert exported[0]["id"] == sample_product.id
        assert exported[0]["reviews"][0]["comment"] == "Bagus"
