"""Utils package for the review collector."""

from .helpers import (
    format_rating,
    format_review_date,
    generate_id,
    identify_platform,
    platform_label,
    sanitize_text,
    star_states,
    utc_now_iso,
    validate_url,
)

__all__ = [
    "generate_id",
    "utc_now_iso",
    "sanitize_text",
    "identify_platform",
    "validate_url",
    "format_rating",
    "star_states",
    "platform_label",
    "format_review_date",
]
