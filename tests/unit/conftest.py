from datetime import datetime, timedelta, UTC

import pytest

from batchshortener.models import ClickEventModel, ShortURLModel
from batchshortener.dao.memory import ShortURLMemoryDAO


@pytest.fixture
def created_at() -> datetime:
    return datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def make_short_url(created_at):
    """Factory building ShortURLModel instances with sensible defaults."""

    def _make(shortcode: str = 'abc123', target: str = 'https://example.com/article/123', validity_minutes: int = 30, **kwargs):
        start = kwargs.pop('created_at', created_at)
        return ShortURLModel(
            id=kwargs.pop('id', f'id-{shortcode}'),
            target=target,
            shortcode=shortcode,
            short_url=f'http://localhost:3000/s/{shortcode}',
            validity_minutes=validity_minutes,
            created_at=start,
            expires_at=start + timedelta(minutes=validity_minutes),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_click(created_at):
    """Factory building ClickEventModel instances."""

    def _make(click_id: str = 'click-1', timestamp: datetime | None = None):
        return ClickEventModel(
            id=click_id,
            timestamp=timestamp or created_at,
            referrer='http://localhost:3000',
            location='New York, US',
            user_agent='pytest',
        )

    return _make


@pytest.fixture
def dao() -> ShortURLMemoryDAO:
    return ShortURLMemoryDAO()
