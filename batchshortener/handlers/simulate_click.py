import logging
import urllib.parse
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from batchshortener.models import ClickEventModel, ShortURLModel
from batchshortener.dao.base import ShortURLBaseDAO
from batchshortener.dao.exceptions import ShortURLNotFoundError
from batchshortener.utils import ShortenerConfig
from batchshortener.utils.helpers import utc_now, new_id
from batchshortener.utils.constants import Defaults


logger = logging.getLogger(__name__)


class ClickStatus(StrEnum):
    OK = 'ok'
    UNKNOWN_SHORTCODE = 'unknown_shortcode'
    EXPIRED = 'expired'


# fmt: off
@dataclass(frozen=True)
class ClickResult:
    status: ClickStatus                     # 'ok' or the reason the click was refused
    short_url: ShortURLModel | None = None  # Record after the click (before it, if refused)
    click: ClickEventModel | None = None    # Recorded click, None if refused
    message: str = ''
    error_code: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is ClickStatus.OK
# fmt: on


def origin(url: str) -> str:
    """Return the '<scheme>://<host>[:port]' part of a URL."""
    components = urllib.parse.urlsplit(url)
    return f'{components.scheme}://{components.netloc}'


def simulate_click(
    shortcode: str,
    dao: ShortURLBaseDAO,
    *,
    config: ShortenerConfig | None = None,
    referrer: str | None = None,
    location: str = Defaults.CLICK_LOCATION,
    user_agent: str = Defaults.USER_AGENT,
    now: datetime | None = None,
) -> ClickResult:
    """Record a synthesized click against a short URL

    This handler follows this procedure to simulate a click:
    - Step 1: Look up the short URL record
    - Step 2: Refuse clicks on expired links
    - Step 3: Build a ClickEventModel and record it in the registry

    Args:
        shortcode (str):
            Shortcode of the clicked short URL.
        dao (ShortURLBaseDAO):
            Short URL registry owned by the caller.
        config (ShortenerConfig | None):
            Shortener settings; the referrer defaults to the origin of `base_url`.
        referrer (str | None):
            Referrer of the click.
        location (str):
            Coarse-grained location of the click. Defaults to 'New York, US'.
        user_agent (str):
            User agent of the clicking client.
        now (datetime | None):
            Time of the click. Defaults to the current UTC time.

    Returns:
        ClickResult: the outcome. Unknown and expired links are reported, not raised.

    Example:
        >>> result = simulate_click('abc123', dao)
        >>> result.short_url.click_count
        1
    """
    config = config or ShortenerConfig()
    now = now or utc_now()

    # 1- Look up the short URL record
    short_url = dao.get(shortcode)
    if short_url is None:
        logger.error('Failed to simulate click: shortcode not found.', extra={'shortcode': shortcode})
        return ClickResult(
            status=ClickStatus.UNKNOWN_SHORTCODE,
            message=f"Short URL with code '{shortcode}' not found.",
            error_code=ShortURLNotFoundError.error_code,
        )

    # 2- Expired links can't be clicked
    if short_url.is_expired(now):
        logger.warning(
            'Refused click on expired short URL.',
            extra={'shortcode': shortcode, 'expires_at': short_url.expires_at.isoformat()},
        )
        return ClickResult(
            status=ClickStatus.EXPIRED,
            short_url=short_url,
            message=f"Short URL with code '{shortcode}' expired.",
            error_code='click:expired_short_url',
        )

    # 3- Record the click
    click = ClickEventModel(
        id=new_id(),
        timestamp=now,
        referrer=referrer or origin(config.base_url),
        location=location,
        user_agent=user_agent,
    )
    try:
        updated = dao.hit(shortcode, click)
    except ShortURLNotFoundError as e:  # pragma: no cover
        return ClickResult(status=ClickStatus.UNKNOWN_SHORTCODE, message=str(e), error_code=e.error_code)

    logger.info('Simulated click added.', extra={'shortcode': shortcode, 'click_id': click.id})
    return ClickResult(status=ClickStatus.OK, short_url=updated, click=click, message='Click recorded.')
