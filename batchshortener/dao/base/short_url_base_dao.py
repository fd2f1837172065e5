"""Abstract base class for ShortURL data access objects (DAOs).

This class establishes a consistent contract for the short URL registry,
regardless of where the records are kept.

Responsibilities:
    - Provide an interface for inserting and retrieving ShortURLModel objects.
    - Enforce shortcode uniqueness at insert time.
    - Record clicks against stored short URLs.

Example:
    Typical usage with the in-memory implementation:

        >>> from batchshortener.models import ShortURLModel
        >>> from batchshortener.dao.memory import ShortURLMemoryDAO

        >>> dao = ShortURLMemoryDAO()
        >>> dao.insert(short_url)

        >>> dao.is_unique("a1b2c3")
        False

        >>> dao.get("a1b2c3").target
        'https://example.com/blog/article-123'
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from batchshortener.models import ClickEventModel, ShortURLModel


class ShortURLBaseDAO(ABC):
    """Interface for ShortURL data access objects (DAOs).

    Methods:
        is_unique(shortcode: str) -> bool:
            True iff no stored short URL uses the shortcode.

        insert(short_url: ShortURLModel) -> ShortURLBaseDAO:
            Insert a new ShortURLModel.
            Raises ShortURLAlreadyExistsError if the shortcode already exists.

        insert_many(short_urls: Iterable[ShortURLModel]) -> ShortURLBaseDAO:
            Insert several ShortURLModel objects, all or nothing.
            Raises ShortURLAlreadyExistsError if any shortcode is taken.

        hit(shortcode: str, click: ClickEventModel) -> ShortURLModel:
            Append a click to a stored short URL.
            Raises ShortURLNotFoundError if the shortcode doesn't exist.

        get(shortcode: str) -> ShortURLModel | None:
            Retrieve a ShortURLModel by shortcode, None if not found.

        all() -> list[ShortURLModel]:
            Every stored ShortURLModel in insertion order.

        count() -> int:
            Number of stored short URLs.

    NOTE:
        - Records are never deleted. Expiry is computed from `expires_at`,
          it does not remove anything from the registry.
    """

    @abstractmethod
    def is_unique(self, shortcode: str) -> bool:
        pass

    @abstractmethod
    def insert(self, short_url: ShortURLModel) -> 'ShortURLBaseDAO':
        """Insert a new ShortURLModel.

        Args:
            short_url (ShortURLModel):
                The ShortURLModel instance to be inserted.

        Returns:
            ShortURLBaseDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a ShortURLModel with the same shortcode already exists
        """
        pass

    @abstractmethod
    def insert_many(self, short_urls: Iterable[ShortURLModel]) -> 'ShortURLBaseDAO':
        """Insert several ShortURLModel objects atomically.

        Either every short URL is stored or none is.

        Raises:
            ShortURLAlreadyExistsError:
                If any shortcode is taken, or repeated within `short_urls`.
        """
        pass

    @abstractmethod
    def hit(self, shortcode: str, click: ClickEventModel) -> ShortURLModel:
        """Record a click against a stored short URL.

        Args:
            shortcode (str):
                The shortcode of the clicked short URL.
            click (ClickEventModel):
                The click to append to the short URL's history.

        Returns:
            ShortURLModel: the updated record.

        Raises:
            ShortURLNotFoundError:
                If no ShortURLModel with the given shortcode exists.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str) -> ShortURLModel | None:
        pass

    @abstractmethod
    def all(self) -> list[ShortURLModel]:
        pass

    @abstractmethod
    def count(self) -> int:
        pass
