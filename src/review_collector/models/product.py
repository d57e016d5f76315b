"""
Data models for the review collector catalog.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..utils.helpers import generate_id, sanitize_text, utc_now_iso

PLATFORMS = ("shopee", "tokopedia", "bukalapak", "lazada")

MIN_RATING = 1
MAX_RATING = 5


def _check_text(value: Any, label: str, optional: bool = False):
    """Raise ValueError unless value is a string (or None when optional)."""
    if value is None and optional:
        return
    if not isinstance(value, str):
        raise ValueError(f"{label} must be a string, got {type(value).__name__}")


@dataclass
class Product:
    """
    A product listing collected from one of the supported marketplaces.

    ``average_rating`` and ``total_reviews`` are derived from the product's
    reviews and only change through aggregate recomputation.
    """

    name: str
    url: str
    platform: str
    image_url: Optional[str] = None
    price: Optional[str] = None
    average_rating: float = 0.0
    total_reviews: int = 0
    id: str = field(default_factory=generate_id)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def __post_init__(self):
        """Validate data after initialization."""
        _check_text(self.name, "Product name")
        _check_text(self.url, "Product URL")
        _check_text(self.platform, "Platform")
        _check_text(self.image_url, "Image URL", optional=True)
        _check_text(self.price, "Price", optional=True)

        self.name = sanitize_text(self.name)
        self.url = self.url.strip()
        self.platform = self.platform.strip().lower()

        if not self.name:
            raise ValueError("Product name cannot be empty")

        if not self.url:
            raise ValueError("Product URL cannot be empty")

        if self.platform not in PLATFORMS:
            raise ValueError(
                f"Platform must be one of {', '.join(PLATFORMS)}, got {self.platform!r}"
            )

        # Optional fields submitted as blank form inputs are stored as NULL
        self.image_url = (self.image_url or "").strip() or None
        self.price = (self.price or "").strip() or None

        self.average_rating = float(self.average_rating or 0)
        self.total_reviews = int(self.total_reviews or 0)

        # A new product is created and updated at the same instant
        now = utc_now_iso()
        self.created_at = self.created_at or now
        self.updated_at = self.updated_at or self.created_at

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Product":
        """Build a product from a ``products`` table row."""
        return cls(
            id=row["id"],
            name=row["name"],
            url=row["url"],
            platform=row["platform"],
            image_url=row.get("image_url"),
            price=row.get("price"),
            average_rating=row.get("average_rating") or 0.0,
            total_reviews=row.get("total_reviews") or 0,
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def to_dict(self) -> dict:
        """Convert the product to a dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "platform": self.platform,
            "image_url": self.image_url,
            "price": self.price,
            "average_rating": self.average_rating,
            "total_reviews": self.total_reviews,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class Review:
    """
    A customer review attached to a product.
    """

    product_id: str
    reviewer_name: str
    rating: int
    comment: str
    helpful_count: int = 0
    id: str = field(default_factory=generate_id)
    review_date: Optional[str] = None
    created_at: Optional[str] = None

    def __post_init__(self):
        """Validate data after initialization."""
        # bool is an int subclass; a JSON true must not become a 1-star review
        if isinstance(self.rating, bool):
            raise ValueError(f"Rating must be an integer, got {self.rating!r}")

        try:
            rating = int(self.rating)
        except (TypeError, ValueError):
            raise ValueError(f"Rating must be an integer, got {self.rating!r}")

        if rating != self.rating and not isinstance(self.rating, str):
            raise ValueError(f"Rating must be a whole number, got {self.rating}")

        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValueError(
                f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {rating}"
            )
        self.rating = rating

        if not self.product_id:
            raise ValueError("Product ID cannot be empty")

        _check_text(self.reviewer_name, "Reviewer name")
        _check_text(self.comment, "Comment")

        self.reviewer_name = sanitize_text(self.reviewer_name)
        if not self.reviewer_name:
            raise ValueError("Reviewer name cannot be empty")

        self.comment = self.comment.strip()
        if not self.comment:
            raise ValueError("Comment cannot be empty")

        if isinstance(self.helpful_count, bool):
            raise ValueError("Helpful count must be an integer")
        self.helpful_count = int(self.helpful_count or 0)
        if self.helpful_count < 0:
            raise ValueError("Helpful count cannot be negative")

        now = utc_now_iso()
        self.created_at = self.created_at or now
        self.review_date = self.review_date or self.created_at

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Review":
        """Build a review from a ``reviews`` table row."""
        return cls(
            id=row["id"],
            product_id=row["product_id"],
            reviewer_name=row["reviewer_name"],
            rating=row["rating"],
            comment=row["comment"],
            review_date=row["review_date"],
            helpful_count=row.get("helpful_count") or 0,
            created_at=row["created_at"],
        )

    def to_dict(self) -> dict:
        """Convert the review to a dictionary."""
        return {
            "id": self.id,
            "product_id": self.product_id,
            "reviewer_name": self.reviewer_name,
            "rating": self.rating,
            "comment": self.comment,
            "review_date": self.review_date,
            "helpful_count": self.helpful_count,
            "created_at": self.created_at,
        }
