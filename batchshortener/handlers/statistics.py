"""Click statistics over the short URL registry.

Functions:
    collect_statistics(dao, now=None) -> StatisticsSummary
        Aggregate link and click counts and per-link details.
"""

from dataclasses import dataclass
from datetime import datetime

from batchshortener.models import ClickEventModel, ShortURLModel
from batchshortener.dao.base import ShortURLBaseDAO
from batchshortener.utils.helpers import utc_now


# fmt: off
@dataclass(frozen=True)
class LinkStatistics:
    shortcode: str
    short_url: str
    target: str
    click_count: int
    created_at: datetime
    expires_at: datetime
    expired: bool                          # Computed against the time of collection
    clicks: tuple[ClickEventModel, ...]    # Click history in insertion order


@dataclass(frozen=True)
class StatisticsSummary:
    total_urls: int
    total_clicks: int
    active_urls: int
    expired_urls: int
    links: tuple[LinkStatistics, ...]
# fmt: on


def link_statistics(short_url: ShortURLModel, now: datetime) -> LinkStatistics:
    return LinkStatistics(
        shortcode=short_url.shortcode,
        short_url=short_url.short_url,
        target=short_url.target,
        click_count=short_url.click_count,
        created_at=short_url.created_at,
        expires_at=short_url.expires_at,
        expired=short_url.is_expired(now),
        clicks=short_url.clicks,
    )


def collect_statistics(dao: ShortURLBaseDAO, now: datetime | None = None) -> StatisticsSummary:
    """Aggregate statistics for every short URL in the registry

    Args:
        dao (ShortURLBaseDAO):
            Short URL registry to read.
        now (datetime | None):
            Reference time for expiry. Defaults to the current UTC time.

    Returns:
        StatisticsSummary: totals plus per-link statistics in insertion order.

    Example:
        >>> summary = collect_statistics(dao)
        >>> summary.total_urls, summary.total_clicks, summary.active_urls
        (3, 7, 2)
    """
    now = now or utc_now()
    links = tuple(link_statistics(short_url, now) for short_url in dao.all())
    expired = sum(1 for link in links if link.expired)
    return StatisticsSummary(
        total_urls=len(links),
        total_clicks=sum(link.click_count for link in links),
        active_urls=len(links) - expired,
        expired_urls=expired,
        links=links,
    )
