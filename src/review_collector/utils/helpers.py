"""
Utility functions for the review collector.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

# Marketplace host fragments used to recognise the platform of a product URL
PLATFORM_DOMAINS = {
    "shopee": ("shopee.co.id", "shopee.com", "shp.ee"),
    "tokopedia": ("tokopedia.com", "tokopedia.link"),
    "bukalapak": ("bukalapak.com",),
    "lazada": ("lazada.co.id", "lazada.com"),
}

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


def generate_id() -> str:
    """Generate a unique identifier for a new record."""
    return str(uuid.uuid4())


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def sanitize_text(text: str) -> str:
    """
    Clean and sanitize single-line text content.

    Args:
        text: Raw text to clean

    Returns:
        Cleaned text
    """
    if not text:
        return ""

    # Remove null bytes and collapse whitespace
    text = text.replace("\x00", "")
    text = " ".join(text.split())

    return text.strip()


def identify_platform(url: str) -> Optional[str]:
    """
    Identify the marketplace a product URL belongs to.

    Args:
        url: Product URL

    Returns:
        Platform name, or None if the host is not a known marketplace
    """
    try:
        host = (urlparse(url).hostname or "").lower()
    except ValueError:
        return None

    for platform, domains in PLATFORM_DOMAINS.items():
        if any(host == domain or host.endswith("." + domain) for domain in domains):
            return platform

    return None


def validate_url(url: str) -> bool:
    """
    Check that a URL is an absolute http(s) URL.

    Args:
        url: URL to validate

    Returns:
        True if the URL has an http or https scheme and a host
    """
    if not url or not isinstance(url, str):
        return False

    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False

    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def format_rating(rating: float) -> str:
    """Format an average rating with one decimal place."""
    return f"{float(rating or 0):.1f}"


def star_states(rating: float) -> List[bool]:
    """
    Filled/empty state of the five rating stars.

    Averages are rounded half up to the nearest whole star.
    """
    whole = int(float(rating or 0) + 0.5)
    return [star <= whole for star in range(1, 6)]


def platform_label(platform: str) -> str:
    """Display label for a platform name."""
    return (platform or "").capitalize()


def format_review_date(value: str) -> str:
    """
    Render an ISO timestamp as a long date, e.g. ``15 January 2024``.

    Unparseable values are returned unchanged.
    """
    if not value:
        return ""

    try:
        date = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Could not parse review date {value!r}")
        return value

    return f"{date.day} {MONTH_NAMES[date.month - 1]} {date.year}"
