"""Rating analysis for the review collector."""

from .ratings import (
    ALL_PLATFORMS,
    FILTER_CHOICES,
    HistogramBar,
    RatingAggregate,
    compute_aggregate,
    dashboard_view,
    distribution_widths,
    filter_products,
    rating_distribution,
    rating_histogram,
    summary_stats,
)

__all__ = [
    "ALL_PLATFORMS",
    "FILTER_CHOICES",
    "HistogramBar",
    "RatingAggregate",
    "compute_aggregate",
    "rating_distribution",
    "distribution_widths",
    "rating_histogram",
    "filter_products",
    "summary_stats",
    "dashboard_view",
]
