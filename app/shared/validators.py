"""Shared validation utilities"""

from datetime import date, datetime
from typing import Optional
from urllib.parse import urlparse


def validate_http_url(url: str) -> str:
    """
    Validate that a value is an absolute http(s) URL.

    Args:
        url: Candidate URL (e.g. an uploaded document location)

    Returns:
        The stripped URL

    Raises:
        ValueError: If the URL is not absolute or uses another scheme
    """
    url = (url or "").strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"Invalid URL: {url!r}")
    return url


def parse_iso_date(value: str) -> date:
    """
    Parse a calendar date in ``YYYY-MM-DD`` form.

    Raises:
        ValueError: If the value is not a valid date
    """
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValueError(f"Invalid date format: {value!r}. Expected YYYY-MM-DD") from None


def clean_text(value: Optional[str], max_length: int = 2000) -> Optional[str]:
    """Strip free text, turning blanks into None and enforcing a maximum length"""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if len(value) > max_length:
        raise ValueError(f"Text must be at most {max_length} characters")
    return value
