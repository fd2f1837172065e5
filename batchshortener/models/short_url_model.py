from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, UTC

from batchshortener.models.click_event_model import ClickEventModel


@dataclass(frozen=True)
class ShortURLModel:
    """Represent a shortened URL mapping and its click history.

    Attributes:
        id (str):
            Opaque unique identifier assigned at creation.
        target (str):
            The original long URL that the shortcode stands for.
        shortcode (str):
            The unique short identifier representing the shortened URL.
        short_url (str):
            Display string of the short URL, e.g. 'http://localhost:3000/s/abc123'.
        validity_minutes (int):
            Validity period of the link in minutes.
        created_at (datetime):
            Creation time (UTC).
        expires_at (datetime):
            created_at + validity_minutes, derived once at creation.
        clicks (tuple[ClickEventModel, ...]):
            Recorded clicks in insertion order.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> created_at = datetime(2026, 1, 1, tzinfo=UTC)
        >>> url = ShortURLModel(
        ...     id="4f1c",
        ...     target="https://example.com/article/123",
        ...     shortcode="abc123",
        ...     short_url="http://localhost:3000/s/abc123",
        ...     validity_minutes=30,
        ...     created_at=created_at,
        ...     expires_at=created_at + timedelta(minutes=30),
        ... )
        >>> url.click_count
        0
        >>> url.is_expired(created_at + timedelta(minutes=31))
        True
    """

    id: str
    target: str
    shortcode: str
    short_url: str
    validity_minutes: int
    created_at: datetime
    expires_at: datetime
    clicks: tuple[ClickEventModel, ...] = field(default=())

    @property
    def click_count(self) -> int:
        return len(self.clicks)

    def with_click(self, click: ClickEventModel) -> 'ShortURLModel':
        """Return a copy of this record with `click` appended to its history."""
        return replace(self, clicks=(*self.clicks, click))

    def is_expired(self, now: datetime | None = None) -> bool:
        """True once `now` (default: current UTC time) is past `expires_at`."""
        return (now or datetime.now(UTC)) > self.expires_at

    def time_until_expiry(self, now: datetime | None = None) -> timedelta:
        """Time left before expiry, clamped to zero for expired links."""
        remaining = self.expires_at - (now or datetime.now(UTC))
        return max(remaining, timedelta(0))
