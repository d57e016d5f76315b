"""
Rating aggregation, histogram and dashboard statistics.

Every function here is a pure transform over already-loaded models.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence

from ..models.product import MAX_RATING, MIN_RATING, PLATFORMS, Product, Review

ALL_PLATFORMS = "all"
FILTER_CHOICES = (ALL_PLATFORMS,) + PLATFORMS


@dataclass
class RatingAggregate:
    """Derived rating values of a product."""

    average_rating: float
    total_reviews: int


@dataclass
class HistogramBar:
    """One row of the rating distribution chart."""

    rating: int
    count: int
    width: float


def compute_aggregate(reviews: Sequence[Review]) -> RatingAggregate:
    """
    Mean rating and review count of a product.

    An empty review list yields an average of 0.
    """
    total = len(reviews)
    if total == 0:
        return RatingAggregate(average_rating=0.0, total_reviews=0)

    return RatingAggregate(
        average_rating=sum(review.rating for review in reviews) / total,
        total_reviews=total,
    )


def rating_distribution(reviews: Iterable[Review]) -> List[int]:
    """
    Count reviews per star rating.

    Returns:
        Five counts where index ``k`` holds the number of ``k + 1`` star reviews
    """
    distribution = [0] * (MAX_RATING - MIN_RATING + 1)
    for review in reviews:
        distribution[review.rating - MIN_RATING] += 1
    return distribution


def distribution_widths(distribution: Sequence[int]) -> List[float]:
    """Bar width percentage of each bucket relative to the largest one."""
    max_count = max(distribution) if distribution else 0
    if max_count == 0:
        return [0.0 for _ in distribution]
    return [count / max_count * 100 for count in distribution]


def rating_histogram(reviews: Iterable[Review]) -> List[HistogramBar]:
    """Histogram rows ordered from five stars down to one."""
    distribution = rating_distribution(reviews)
    widths = distribution_widths(distribution)

    return [
        HistogramBar(rating=rating, count=distribution[rating - 1], width=widths[rating - 1])
        for rating in range(MAX_RATING, MIN_RATING - 1, -1)
    ]


def filter_products(products: Sequence[Product], platform: str = ALL_PLATFORMS) -> List[Product]:
    """
    Products listed on a platform.

    Args:
        products: Product list
        platform: ``all`` or one of the supported platforms

    Returns:
        The full list for ``all``, otherwise the products of that platform
    """
    if platform not in FILTER_CHOICES:
        raise ValueError(f"Unknown platform filter: {platform!r}")

    if platform == ALL_PLATFORMS:
        return list(products)
    return [product for product in products if product.platform == platform]


def summary_stats(products: Sequence[Product]) -> Dict[str, Any]:
    """Product count, mean of average ratings and total review count."""
    total = len(products)
    avg_rating = sum(p.average_rating for p in products) / total if total else 0.0

    return {
        "total": total,
        "avg_rating": avg_rating,
        "total_reviews": sum(p.total_reviews for p in products),
    }


def dashboard_view(products: Sequence[Product], platform: str = ALL_PLATFORMS) -> Dict[str, Any]:
    """
    Everything the dashboard screen shows.

    ``stats`` always covers the whole catalog; ``visible_stats`` covers only
    the filtered list.
    """
    visible = filter_products(products, platform)

    return {
        "platform": platform,
        "products": visible,
        "stats": summary_stats(products),
        "visible_stats": summary_stats(visible),
    }
