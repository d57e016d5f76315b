"""
Unit tests for the product and review models.
"""

import pytest

from review_collector.models.product import PLATFORMS, Product, Review


class TestProduct:
    """Test cases for the Product model."""

    def test_product_creation(self, sample_product):
        """Test creating a valid Product instance."""
        assert sample_product.platform == "shopee"
        assert sample_product.average_rating == 0.0
        assert sample_product.total_reviews == 0
        assert sample_product.id
        assert sample_product.created_at
        assert sample_product.updated_at

    def test_generated_ids_are_unique(self):
        """Each product gets its own id."""
        first = Product(name="A", url="https://shopee.co.id/a", platform="shopee")
        second = Product(name="A", url="https://shopee.co.id/a", platform="shopee")
        assert first.id != second.id

    def test_blank_optional_fields_become_none(self):
        """Blank price and image URL are stored as missing."""
        product = Product(
            name="Sepatu", url="https://tokopedia.com/s", platform="tokopedia", price="  ", image_url=""
        )
        assert product.price is None
        assert product.image_url is None

    def test_platform_is_normalised(self):
        """Platform names are case-insensitive."""
        product = Product(name="Tas", url="https://lazada.co.id/t", platform=" Lazada ")
        assert product.platform == "lazada"

    @pytest.mark.parametrize("platform", ["amazon", "", "all"])
    def test_invalid_platform(self, platform):
        """Test that unknown platforms raise ValueError."""
        with pytest.raises(ValueError, match="Platform must be one of"):
            Product(name="Tas", url="https://example.com/t", platform=platform)

    def test_empty_name(self):
        """Test that an empty name raises ValueError."""
        with pytest.raises(ValueError, match="Product name cannot be empty"):
            Product(name="   ", url="https://shopee.co.id/x", platform="shopee")

    def test_empty_url(self):
        """Test that an empty URL raises ValueError."""
        with pytest.raises(ValueError, match="Product URL cannot be empty"):
            Product(name="Tas", url="", platform="shopee")

    def test_product_to_dict(self, sample_product):
        """Test converting a Product to a dictionary."""
        result = sample_product.to_dict()
        assert isinstance(result, dict)
        assert result["name"] == "iPhone 15 Pro Max 256GB"
        assert result["price"] == "Rp 21.999.000"
        assert set(result) == {
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
        }

    def test_from_row(self, sample_product):
        """A stored row rebuilds the same product."""
        rebuilt = Product.from_row(sample_product.to_dict())
        assert rebuilt == sample_product

    def test_new_product_timestamps_match(self):
        """A fresh product is created and updated at the same instant."""
        product = Product(name="Tas", url="https://lazada.co.id/t", platform="lazada")
        assert product.created_at == product.updated_at

    def test_stored_timestamps_are_kept(self):
        product = Product(
            name="Tas",
            url="https://lazada.co.id/t",
            platform="lazada",
            created_at="2024-01-01T00:00:00+00:00",
            updated_at="2024-03-01T00:00:00+00:00",
        )
        assert product.created_at == "2024-01-01T00:00:00+00:00"
        assert product.updated_at == "2024-03-01T00:00:00+00:00"

    @pytest.mark.parametrize(
        "field_name, value",
        [("name", 123), ("url", ["https://shopee.co.id/x"]), ("platform", None), ("price", 15000)],
    )
    def test_non_string_fields(self, field_name, value):
        """Test that non-string attributes raise ValueError."""
        attributes = {"name": "Tas", "url": "https://shopee.co.id/x", "platform": "shopee"}
        attributes[field_name] = value

        with pytest.raises(ValueError, match="must be a string"):
            Product(**attributes)

    def test_supported_platforms(self):
        assert PLATFORMS == ("shopee", "tokopedia", "bukalapak", "lazada")


class TestReview:
    """Test cases for the Review model."""

    def test_review_creation(self, make_review):
        """Test creating a valid Review instance."""
        review = make_review(rating=4)
        assert review.rating == 4
        assert review.helpful_count == 0
        assert review.review_date
        assert review.id

    def test_rating_from_form_string(self, make_review):
        """Ratings submitted as form strings are converted."""
        review = make_review(rating="3")
        assert review.rating == 3

    @pytest.mark.parametrize("rating", [0, 6, -1])
    def test_rating_out_of_range(self, make_review, rating):
        """Test that out-of-range ratings raise ValueError."""
        with pytest.raises(ValueError, match="Rating must be between 1 and 5"):
            make_review(rating=rating)

    @pytest.mark.parametrize("rating", [None, "", "five", 4.5])
    def test_rating_not_whole_number(self, make_review, rating):
        """Test that non-integer ratings raise ValueError."""
        with pytest.raises(ValueError, match="Rating must be"):
            make_review(rating=rating)

    def test_empty_reviewer_name(self, make_review):
        with pytest.raises(ValueError, match="Reviewer name cannot be empty"):
            make_review(reviewer_name="")

    def test_empty_comment(self, make_review):
        with pytest.raises(ValueError, match="Comment cannot be empty"):
            make_review(comment="  ")

    @pytest.mark.parametrize("rating", [True, False])
    def test_boolean_rating(self, make_review, rating):
        """Booleans are not accepted as star ratings."""
        with pytest.raises(ValueError, match="Rating must be an integer"):
            make_review(rating=rating)

    @pytest.mark.parametrize("field_name", ["reviewer_name", "comment"])
    def test_non_string_text(self, make_review, field_name):
        with pytest.raises(ValueError, match="must be a string"):
            make_review(**{field_name: 42})

    def test_review_date_defaults_to_created_at(self, make_review):
        review = make_review()
        assert review.review_date == review.created_at

    def test_negative_helpful_count(self):
        with pytest.raises(ValueError, match="Helpful count cannot be negative"):
            Review(product_id="p", reviewer_name="Ani", rating=5, comment="Ok", helpful_count=-1)

    def test_review_to_dict(self, make_review):
        """Test converting a Review to a dictionary."""
        result = make_review(rating=2, comment="Kurang bagus").to_dict()
        assert result["rating"] == 2
        assert result["comment"] == "Kurang bagus"
        assert result["helpful_count"] == 0
