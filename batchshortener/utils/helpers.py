"""Helper utilities shared by the handlers.

Functions:
    utc_now() -> datetime
        Current time as a timezone-aware UTC datetime
    new_id() -> str
        Generate an opaque unique identifier
    get_short_url(shortcode: str, base_url: str) -> str
        Get string representation of short URL for a given shortcode
    compute_expiry(created_at: datetime, validity_minutes: int) -> datetime
        Compute the expiry moment of a short URL

Example:
    >>> from batchshortener.utils.helpers import get_short_url
    >>> get_short_url('abc123', 'http://localhost:3000')
    'http://localhost:3000/s/abc123'
    >>> get_short_url('abc123', 'https://sho.rt/')
    'https://sho.rt/s/abc123'
"""

import uuid
from datetime import datetime, timedelta, UTC

from batchshortener.utils.constants import Defaults


def utc_now() -> datetime:
    return datetime.now(UTC)


def new_id() -> str:
    return uuid.uuid4().hex


def get_short_url(shortcode: str, base_url: str = Defaults.BASE_URL) -> str:
    """Get string representation of shortened URL

    Args:
        shortcode (str): shortcode
        base_url (str): configured public origin, e.g. 'http://localhost:3000'

    Returns:
        str: short url string representation, '<base_url>/s/<shortcode>'
    """
    return f'{base_url.rstrip("/")}/{Defaults.SHORT_URL_PATH}/{shortcode}'


def compute_expiry(created_at: datetime, validity_minutes: int) -> datetime:
    """Compute the expiry moment of a short URL.

    Example:
        >>> compute_expiry(datetime(2026, 1, 1, tzinfo=UTC), 30)
        datetime.datetime(2026, 1, 1, 0, 30, tzinfo=datetime.timezone.utc)
    """
    return created_at + timedelta(minutes=validity_minutes)
