"""Data Access Object (DAO) implementation keeping shortened URLs in memory

This module provides the in-process short URL registry. Records live for as
long as the owning DAO instance does.

Responsibilities:
    - Insert and retrieve short URLs;
    - Enforce shortcode uniqueness at insert time;
    - Record clicks as copy-on-write updates of the stored record;
    - Log every mutation and every rejected operation.

Classes:
    ShortURLMemoryDAO:
        DAO for storing and retrieving ShortURLModel in memory.

Example:
    >>> from batchshortener.dao.memory import ShortURLMemoryDAO

    >>> dao = ShortURLMemoryDAO()
    >>> dao.insert(short_url)
    <ShortURLMemoryDAO records=1>
    >>> dao.hit("abc123", click).click_count
    1
"""

import logging
from collections.abc import Iterable

from beartype import beartype

from batchshortener.models import ClickEventModel, ShortURLModel
from batchshortener.dao.base import ShortURLBaseDAO
from batchshortener.dao.exceptions import ShortURLAlreadyExistsError, ShortURLNotFoundError


logger = logging.getLogger(__name__)


class ShortURLMemoryDAO(ShortURLBaseDAO):
    """In-memory Data Access Object (DAO) for managing short URL mappings

    Records are kept in an insertion-ordered dict keyed by shortcode. Stored
    records are frozen; recording a click replaces the record under its key
    with a copy that has the click appended.

    Attributes:
        _records (dict[str, ShortURLModel]):
            Stored short URLs keyed by shortcode, in insertion order.
    """

    def __init__(self, short_urls: Iterable[ShortURLModel] = ()):
        self._records: dict[str, ShortURLModel] = {}
        if short_urls:
            self.insert_many(short_urls)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, shortcode: object) -> bool:
        return shortcode in self._records

    def __repr__(self) -> str:
        return f'<ShortURLMemoryDAO records={len(self._records)}>'

    @beartype
    def is_unique(self, shortcode: str) -> bool:
        return shortcode not in self._records

    @beartype
    def insert(self, short_url: ShortURLModel) -> 'ShortURLMemoryDAO':
        """Insert a short URL mapping

        Raises:
            ShortURLAlreadyExistsError:
                If a short URL with the same shortcode already exists.

        Example:
            >>> dao.insert(short_url)
            <ShortURLMemoryDAO records=1>
        """
        if not self.is_unique(short_url.shortcode):
            logger.error('Attempted to add duplicate shortcode.', extra={'shortcode': short_url.shortcode})
            raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.")

        self._store(short_url)
        return self

    @beartype
    def insert_many(self, short_urls: Iterable[ShortURLModel]) -> 'ShortURLMemoryDAO':
        """Insert several short URL mappings, all or nothing

        Every shortcode is checked against the registry and against the other
        short URLs of the same call before anything is stored.

        Raises:
            ShortURLAlreadyExistsError:
                If any shortcode is taken or repeated. Nothing is stored.
        """
        pending = list(short_urls)

        seen = set()
        for short_url in pending:
            if short_url.shortcode in seen or not self.is_unique(short_url.shortcode):
                logger.error(
                    'Attempted to add duplicate shortcode.',
                    extra={'shortcode': short_url.shortcode, 'batch_size': len(pending)},
                )
                raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.")
            seen.add(short_url.shortcode)

        for short_url in pending:
            self._store(short_url)
        return self

    @beartype
    def hit(self, shortcode: str, click: ClickEventModel) -> ShortURLModel:
        """Append a click to a stored short URL

        Raises:
            ShortURLNotFoundError:
                If no short URL with the given shortcode exists.

        Example:
            >>> dao.hit('abc123', click).click_count
            1
        """
        short_url = self._records.get(shortcode)
        if short_url is None:
            logger.error(
                'Attempted to add click to non-existent shortcode.',
                extra={'shortcode': shortcode, 'click_id': click.id},
            )
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")

        updated = short_url.with_click(click)
        self._records[shortcode] = updated
        logger.info('Click recorded.', extra={'shortcode': shortcode, 'click_id': click.id})
        return updated

    @beartype
    def get(self, shortcode: str) -> ShortURLModel | None:
        return self._records.get(shortcode)

    def all(self) -> list[ShortURLModel]:
        return list(self._records.values())

    def count(self) -> int:
        return len(self._records)

    def _store(self, short_url: ShortURLModel) -> None:
        self._records[short_url.shortcode] = short_url
        logger.info(
            'URL shortened successfully.',
            extra={'shortcode': short_url.shortcode, 'target': short_url.target},
        )
