"""
Database management for the review collector.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..models.product import Product, Review
from ..utils.helpers import utc_now_iso

logger = logging.getLogger(__name__)

# Columns per table; table and column names are checked against this
# before they are interpolated into SQL.
SCHEMA = {
    "products": (
        "id",
        "name",
        "url",
        "platform",
        "image_url",
        "price",
        "average_rating",
        "total_reviews",
        "created_at",
        "updated_at",
    ),
    "reviews": (
        "id",
        "product_id",
        "reviewer_name",
        "rating",
        "comment",
        "review_date",
        "helpful_count",
        "created_at",
    ),
}


class StoreError(Exception):
    """Raised when an operation against the backing store fails."""


class DatabaseManager:
    """
    Data-access handle for the ``products`` and ``reviews`` tables.

    One instance is created at process start and passed to the components
    that need it. Every operation opens its own short-lived connection.

    Features:
    - SQLite database with the catalog schema
    - Generic select/insert/update helpers over the known tables
    - Typed helpers returning Product and Review models
    - Data export capabilities
    """

    def __init__(self, db_path: str = "data/review_collector.db"):
        """
        Initialize the database manager.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

    def _init_database(self):
        """Initialize the database with required tables and indexes."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS products (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    url TEXT NOT NULL,
                    platform TEXT NOT NULL
                        CHECK (platform IN ('shopee', 'tokopedia', 'bukalapak', 'lazada')),
                    image_url TEXT,
                    price TEXT,
                    average_rating REAL NOT NULL DEFAULT 0,
                    total_reviews INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """
            )

            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS reviews (
                    id TEXT PRIMARY KEY,
                    product_id TEXT NOT NULL REFERENCES products(id),
                    reviewer_name TEXT NOT NULL,
                    rating INTEGER NOT NULL CHECK (rating BETWEEN 1 AND 5),
                    comment TEXT NOT NULL,
                    review_date TEXT NOT NULL,
                    helpful_count INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL
                )
            """
            )

            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_products_created_at ON products(created_at)"
            )
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_products_platform ON products(platform)")
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_reviews_product_id ON reviews(product_id)"
            )

            conn.commit()
            logger.info(f"Database initialized at {self.db_path}")

    @contextmanager
    def _get_connection(self):
        """Context manager for database connections."""
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            logger.error(f"Could not open database {self.db_path}: {e}")
            raise StoreError(str(e)) from e

        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Database error: {e}")
            raise StoreError(str(e)) from e
        finally:
            conn.close()

    @staticmethod
    def _check_columns(table: str, columns) -> None:
        """Reject table or column names outside the known schema."""
        if table not in SCHEMA:
            raise StoreError(f"Unknown table: {table}")

        unknown = [column for column in columns if column not in SCHEMA[table]]
        if unknown:
            raise StoreError(f"Unknown column(s) for {table}: {', '.join(unknown)}")

    # Generic query interface

    def select_all(
        self, table: str, order_by: str = "created_at", descending: bool = True
    ) -> List[Dict[str, Any]]:
        """
        Select every row of a table.

        Args:
            table: Table name
            order_by: Column to order by
            descending: Sort direction

        Returns:
            List of row dictionaries
        """
        self._check_columns(table, [order_by])
        order = "DESC" if descending else "ASC"
        query = f"SELECT * FROM {table} ORDER BY {order_by} {order}"

        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query)
            return [dict(row) for row in cursor.fetchall()]

    def select_where(
        self,
        table: str,
        column: str,
        value: Any,
        order_by: Optional[str] = None,
        descending: bool = True,
    ) -> List[Dict[str, Any]]:
        """
        Select the rows of a table whose column equals a value.

        Args:
            table: Table name
            column: Column compared for equality
            value: Value to match
            order_by: Optional column to order by
            descending: Sort direction when ordering

        Returns:
            List of row dictionaries
        """
        self._check_columns(table, [column] + ([order_by] if order_by else []))
        query = f"SELECT * FROM {table} WHERE {column} = ?"

        if order_by:
            order = "DESC" if descending else "ASC"
            query += f" ORDER BY {order_by} {order}"

        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, (value,))
            return [dict(row) for row in cursor.fetchall()]

    def insert_returning(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a row and return it as stored.

        Args:
            table: Table name
            values: Column values for the new row (must include ``id``)

        Returns:
            The inserted row
        """
        if "id" not in values:
            raise StoreError("Inserted rows must carry an id")

        columns = list(values.keys())
        self._check_columns(table, columns)

        placeholders = ", ".join("?" for _ in columns)
        query = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"

        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, [values[column] for column in columns])
            conn.commit()

            cursor.execute(f"SELECT * FROM {table} WHERE id = ?", (values["id"],))
            row = cursor.fetchone()

        logger.debug(f"Inserted row {values['id']} into {table}")
        return dict(row)

    def update_where(self, table: str, values: Dict[str, Any], column: str, value: Any) -> int:
        """
        Update the rows of a table whose column equals a value.

        Args:
            table: Table name
            values: Column values to set
            column: Column compared for equality
            value: Value to match

        Returns:
            Number of rows updated
        """
        if not values:
            return 0

        columns = list(values.keys())
        self._check_columns(table, columns + [column])

        assignments = ", ".join(f"{name} = ?" for name in columns)
        query = f"UPDATE {table} SET {assignments} WHERE {column} = ?"
        params = [values[name] for name in columns] + [value]

        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            conn.commit()
            return cursor.rowcount

    # Typed helpers

    def create_product(self, product: Product) -> Product:
        """Store a new product and return it as stored."""
        row = self.insert_returning("products", product.to_dict())
        logger.info(f"Created product {row['id']} ({row['platform']}): {row['name']}")
        return Product.from_row(row)

    def get_product(self, product_id: str) -> Optional[Product]:
        """Fetch one product by id, or None if it does not exist."""
        rows = self.select_where("products", "id", product_id)
        return Product.from_row(rows[0]) if rows else None

    def list_products(self) -> List[Product]:
        """All products, newest first."""
        return [Product.from_row(row) for row in self.select_all("products")]

    def list_reviews(self, product_id: str) -> List[Review]:
        """Reviews of a product, newest first."""
        rows = self.select_where("reviews", "product_id", product_id, order_by="created_at")
        return [Review.from_row(row) for row in rows]

    def add_review(self, review: Review) -> Review:
        """Store a new review and return it as stored."""
        row = self.insert_returning("reviews", review.to_dict())
        logger.info(f"Added review {row['id']} to product {row['product_id']}")
        return Review.from_row(row)

    def update_product_aggregates(
        self, product_id: str, average_rating: float, total_reviews: int
    ) -> str:
        """
        Write derived rating values onto a product.

        Returns:
            The new ``updated_at`` timestamp
        """
        updated_at = utc_now_iso()
        self.update_where(
            "products",
            {
                "average_rating": average_rating,
                "total_reviews": total_reviews,
                "updated_at": updated_at,
            },
            "id",
            product_id,
        )
        return updated_at

    def get_statistics(self) -> Dict[str, Any]:
        """Get database statistics for monitoring."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("SELECT COUNT(*) FROM products")
            total_products = cursor.fetchone()[0]

            cursor.execute("SELECT COUNT(*) FROM reviews")
            total_reviews = cursor.fetchone()[0]

            cursor.execute("SELECT platform, COUNT(*) FROM products GROUP BY platform")
            by_platform = dict(cursor.fetchall())

            cursor.execute("SELECT rating, COUNT(*) FROM reviews GROUP BY rating ORDER BY rating")
            by_rating = dict(cursor.fetchall())

            return {
                "total_products": total_products,
                "total_reviews": total_reviews,
                "by_platform": by_platform,
                "by_rating": by_rating,
            }

    def export_to_json(self, output_file: str = "exports/catalog_export.json") -> int:
        """
        Export all products, each with its reviews, to a JSON file.

        Args:
            output_file: Path to output JSON file

        Returns:
            Number of products exported
        """
        output_path = Path(output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        products = []
        for product in self.list_products():
            entry = product.to_dict()
            entry["reviews"] = [review.to_dict() for review in self.list_reviews(product.id)]
            products.append(entry)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(products, f, indent=2, ensure_ascii=False, default=str)

        logger.info(f"Exported {len(products)} products to {output_file}")
        return len(products)
