"""In-process Data Access Object (DAO) for short URLs

Keeps short URLs in a Python dict. Intended for local runs (SAM local with
`active_backend: memory`) and for tests of the lifecycle engine.

Concurrency:
    - One registry lock guards the dict itself (membership, insert, delete).
    - Click updates are serialized per shortcode through a refcounted lock
      table, so concurrent hits on the same shortcode never lose an increment
      while hits on different shortcodes don't wait for each other. A lock
      entry outlives delete and re-insert for as long as a hit holds it.

Eviction:
    Nothing is removed automatically. `evict(now)` is the sweep that a
    scheduler (or a test) calls to physically delete expired short URLs.
"""

import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timedelta

from beartype import beartype

from shortlinker.models import ShortURLModel, ClickEventModel
from shortlinker.dao.base import ShortURLBaseDAO
from shortlinker.dao.exceptions import ShortURLAlreadyExistsError, ShortURLNotFoundError


class ShortURLMemoryDAO(ShortURLBaseDAO):
    """Thread-safe in-memory implementation of ShortURLBaseDAO

    Example:
        >>> dao = ShortURLMemoryDAO()
        >>> dao.insert(short_url).exists(short_url.shortcode)
        True
    """

    def __init__(self):
        self._short_urls: dict[str, ShortURLModel] = {}
        self._registry_lock = threading.Lock()
        # shortcode -> [lock, number of hits holding or waiting on it]
        self._click_locks: dict[str, list] = {}

    @contextmanager
    def _click_lock(self, shortcode: str):
        """Hold the shortcode's click lock; the entry lives while any hit uses it"""
        with self._registry_lock:
            entry = self._click_locks.setdefault(shortcode, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._registry_lock:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._click_locks[shortcode]

    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLMemoryDAO':
        with self._registry_lock:
            if short_url.shortcode in self._short_urls:
                raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.")
            self._short_urls[short_url.shortcode] = short_url
        return self

    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        with self._registry_lock:
            short_url = self._short_urls.get(shortcode)
        if short_url is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return short_url

    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        with self._registry_lock:
            return shortcode in self._short_urls

    @beartype
    def hit(self, shortcode: str, click: ClickEventModel, **kwargs) -> ShortURLModel:
        """Increment the counter and append the click under the shortcode's lock

        The stored record is only replaced if it is still the one the update
        was computed from: a record deleted (or deleted and re-created) while
        the click was being applied is not resurrected.
        """
        with self._click_lock(shortcode):
            current = self.get(shortcode)
            updated = replace(
                current,
                clicks=current.clicks + 1,
                click_history=(*current.click_history, click),
            )
            with self._registry_lock:
                if self._short_urls.get(shortcode) is not current:
                    raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
                self._short_urls[shortcode] = updated
        return updated

    @beartype
    def all(self, **kwargs) -> list[ShortURLModel]:
        with self._registry_lock:
            return list(self._short_urls.values())

    @beartype
    def delete(self, shortcode: str, **kwargs) -> 'ShortURLMemoryDAO':
        with self._registry_lock:
            if self._short_urls.pop(shortcode, None) is None:
                raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return self

    @beartype
    def evict(self, now: datetime, grace_seconds: int = 0) -> list[str]:
        """Physically delete short URLs which expired at least `grace_seconds` ago

        Returns:
            list[str]: shortcodes that were evicted.
        """
        cutoff = now - timedelta(seconds=grace_seconds)
        with self._registry_lock:
            evicted = [
                shortcode
                for shortcode, short_url in self._short_urls.items()
                if short_url.expires_at is not None and short_url.expires_at <= cutoff
            ]
            for shortcode in evicted:
                del self._short_urls[shortcode]
        return evicted
