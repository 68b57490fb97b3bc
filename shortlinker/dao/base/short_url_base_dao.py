"""Abstract base class for ShortURL data access objects (DAOs).

This class establishes a consistent contract for all ShortURL DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, in-process memory).

Responsibilities:
    - Provide an interface for inserting, retrieving and listing ShortURLModel objects.
    - Enforce shortcode uniqueness at insertion time (the data store is the
      single source of truth, existence checks are only an optimization).
    - Record clicks as one atomic "increment counter + append event" update.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from datetime import datetime, UTC
        >>> from shortlinker.models import ShortURLModel
        >>> from shortlinker.dao.redis import ShortURLRedisDAO

        >>> dao = ShortURLRedisDAO(...)

        >>> short_url = ShortURLModel(
        ...     target="https://example.com/blog/article-123",
        ...     shortcode="a1b2c",
        ...     created_at=datetime.now(UTC),
        ... )
        >>> dao.insert(short_url)

        >>> retrieved = dao.get("a1b2c")
        >>> print(retrieved.target)
        https://example.com/blog/article-123

        >>> print(retrieved.clicks)
        0
"""

from abc import ABC, abstractmethod

from shortlinker.models import ShortURLModel, ClickEventModel


class ShortURLBaseDAO(ABC):
    """Interface for ShortURL data access objects (DAOs).

    Methods:
        insert(short_url: ShortURLModel, **kwargs) -> ShortURLBaseDAO:
            Insert a new ShortURLModel into the data store.
            Raises ShortURLAlreadyExistsError if the short code already exists.

        get(shortcode: str, **kwargs) -> ShortURLModel:
            Retrieve a ShortURLModel (with its click history) by short code.
            Raises ShortURLNotFoundError if the entry does not exist.

        exists(shortcode: str, **kwargs) -> bool:
            Check whether a record with the short code is stored.

        hit(shortcode: str, click: ClickEventModel, **kwargs) -> ShortURLModel:
            Atomically increment the click counter and append the click event.
            Raises ShortURLNotFoundError if the entry does not exist.

        all(**kwargs) -> list[ShortURLModel]:
            Return every stored record in insertion order.

        delete(shortcode: str, **kwargs) -> ShortURLBaseDAO:
            Remove a record (operator action).
            Raises ShortURLNotFoundError if the entry does not exist.

        All methods raise DataStoreError on connection or read/write failure.

    Subclassing:
        Datastore-specific implementations (e.g., ShortURLRedisDAO or
        ShortURLMemoryDAO) must extend this class and implement all
        abstract methods.

    NOTE:
        - Records are evicted by the data store some time after they expire.
          The DAO doesn't interpret expiry: expired records are returned as
          long as they are stored. Evicted records behave as never created.
    """

    @abstractmethod
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLBaseDAO':
        """Insert a new ShortURLModel into the data store.

        Args:
            short_url (ShortURLModel):
                The ShortURLModel instance to be inserted.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLBaseDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a ShortURLModel with the same short code already exists

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Retrieve a ShortURLModel from the data store by its short code.

        Args:
            shortcode (str):
                The short code of the ShortURLModel to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLModel: The stored record, including its click history.

        Raises:
            ShortURLNotFoundError:
                If no ShortURLModel with the given short code exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def exists(self, shortcode: str, **kwargs) -> bool:
        """Check whether a record with the given short code is stored.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def hit(self, shortcode: str, click: ClickEventModel, **kwargs) -> ShortURLModel:
        """Record a click: increment the counter and append the event atomically.

        Concurrent hits on the same short code must never lose an increment
        or an event.

        Args:
            shortcode (str):
                The short code of the clicked ShortURLModel.

            click (ClickEventModel):
                The click event to append to the record's history.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLModel: The record after the click was recorded.

        Raises:
            ShortURLNotFoundError:
                If no ShortURLModel with the given short code exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def all(self, **kwargs) -> list[ShortURLModel]:
        """Return every stored record in insertion order.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete(self, shortcode: str, **kwargs) -> 'ShortURLBaseDAO':
        """Remove a record and its click history from the data store.

        Returns:
            ShortURLBaseDAO: self (for method chaining)

        Raises:
            ShortURLNotFoundError:
                If no ShortURLModel with the given short code exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass
