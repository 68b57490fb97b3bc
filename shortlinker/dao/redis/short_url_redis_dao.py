"""Data Access Object (DAO) implementation for managing shortened URLs in Redis

This module provides a Redis-based implementation of ShortURLBaseDAO for CRUD-like
operations with ShortURLModel instances.

Responsibilities:
    - Insert and retrieve short URLs from Redis;
    - Enforce shortcode uniqueness on insertion (server-side, no check-then-act race);
    - Record clicks atomically (counter increment + click history append);
    - Keep an insertion-ordered index of all short URLs for listings;
    - Let Redis evict expired links via key TTLs (with a grace period);
    - Provide defensive error handling and raise appropriate DAO exceptions.

Storage layout (see RedisKeySchema):
    links:<shortcode>           HASH  target, created_at, expires_at, clicks
    links:<shortcode>:clicks    LIST  JSON click events, oldest first
    links:index                 ZSET  shortcodes scored by created_at (ms)

Classes:
    ShortURLRedisDAO:
        DAO for storing and retrieving ShortURLModel in a Redis datastore.

Example:
    >>> from datetime import datetime, timedelta, UTC
    >>> from shortlinker.models import ShortURLModel, ClickEventModel
    >>> from shortlinker.dao.redis import ShortURLRedisDAO

    >>> dao = ShortURLRedisDAO(prefix="shortlinker:dev")
    >>> now = datetime.now(UTC)

    >>> short_url = ShortURLModel(
    ...     target="https://example.com/page",
    ...     shortcode="abc12",
    ...     created_at=now,
    ...     expires_at=now + timedelta(minutes=30),
    ... )
    >>> dao.insert(short_url)
    <ShortURLRedisDAO>

    >>> click = ClickEventModel(timestamp=now, source='unknown', location='203.0.113.7')
    >>> dao.hit("abc12", click).clicks
    1
"""

import json
from datetime import datetime, timedelta

from beartype import beartype

from shortlinker.constants import Lifecycle
from shortlinker.models import ShortURLModel, ClickEventModel
from shortlinker.dao.base import ShortURLBaseDAO
from shortlinker.dao.redis.mixins import RedisClientMixin
from shortlinker.dao.redis.helpers import handle_redis_connection_error
from shortlinker.dao.exceptions import ShortURLAlreadyExistsError, ShortURLNotFoundError
from shortlinker.utils.helpers import isoformat_utc, parse_isoformat


# KEYS: link hash, index zset, clicks list
# ARGV: shortcode, target, created_at, expires_at ('' if never), index score, evict at ms ('' if never)
INSERT_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 1 then
    return 0
end
redis.call('DEL', KEYS[3])
redis.call('HSET', KEYS[1], 'target', ARGV[2], 'created_at', ARGV[3], 'expires_at', ARGV[4], 'clicks', 0)
if ARGV[6] ~= '' then
    redis.call('PEXPIREAT', KEYS[1], ARGV[6])
end
redis.call('ZADD', KEYS[2], ARGV[5], ARGV[1])
return 1
"""

# KEYS: link hash, clicks list
# ARGV: JSON encoded click event
HIT_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 0 then
    return false
end
local clicks = redis.call('HINCRBY', KEYS[1], 'clicks', 1)
redis.call('RPUSH', KEYS[2], ARGV[1])
local ttl = redis.call('PTTL', KEYS[1])
if ttl > 0 then
    redis.call('PEXPIRE', KEYS[2], ttl)
end
return clicks
"""

# KEYS: index zset, link hash of every ARGV shortcode (same order)
# ARGV: shortcodes to drop from the index if their link hash is gone
PRUNE_SCRIPT = """
local removed = 0
for i, shortcode in ipairs(ARGV) do
    if redis.call('EXISTS', KEYS[i + 1]) == 0 then
        removed = removed + redis.call('ZREM', KEYS[1], shortcode)
    end
end
return removed
"""


class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short URL mappings

    This class implements the ShortURLBaseDAO interface using Redis as a data store.
    Operations which must be atomic (insert, hit, index pruning) run as Lua
    scripts on the Redis server.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
        eviction_grace_seconds (int):
            How long an expired link is kept in Redis before its keys expire.
            During that window reads still find the link (and report it as expired).

    Example:
        >>> dao = ShortURLRedisDAO(redis_host="localhost", prefix="shortlinker:test")
        >>> dao.exists("abc12")
        False
    """

    def __init__(self, *args, eviction_grace_seconds: int = Lifecycle.EVICTION_GRACE_SECONDS, **kwargs):
        super().__init__(*args, **kwargs)
        self.eviction_grace_seconds = int(eviction_grace_seconds)
        self._insert_script = self.redis.register_script(INSERT_SCRIPT)
        self._hit_script = self.redis.register_script(HIT_SCRIPT)
        self._prune_script = self.redis.register_script(PRUNE_SCRIPT)

    @handle_redis_connection_error
    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLRedisDAO':
        """Insert a short URL mapping into Redis

        The existence check and the writes run in one Lua script, so two
        concurrent inserts of the same shortcode can't both succeed.

        NOTE: when the link has an expiry, its hash is set to expire at
              expires_at + eviction_grace_seconds. The click list inherits the
              hash's TTL on every hit.

        Args:
            short_url (ShortURLModel):
                ShortURLModel instance representing the shortened URL mapping.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLRedisDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a short URL with the same shortcode already exists.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        shortcode = short_url.shortcode
        evict_at = ''
        if short_url.expires_at is not None:
            evict_at = self._to_millis(short_url.expires_at + timedelta(seconds=self.eviction_grace_seconds))

        inserted = self._insert_script(
            keys=[self.keys.link_key(shortcode), self.keys.index_key(), self.keys.link_clicks_key(shortcode)],
            args=[
                shortcode,
                short_url.target,
                isoformat_utc(short_url.created_at),
                isoformat_utc(short_url.expires_at) or '',
                self._to_millis(short_url.created_at),
                evict_at,
            ],
        )
        if not inserted:
            raise ShortURLAlreadyExistsError(f"Short URL with code '{shortcode}' already exists.")
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Retrieve a stored short URL mapping and its click history by shortcode

        Both keys are read in a single Redis transaction, so the counter and
        the history are consistent with each other.

        Raises:
            ShortURLNotFoundError:
                If the short URL does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('abc12')
            ShortURLModel(target='https://example.com', shortcode='abc12', ...)
        """
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hgetall(self.keys.link_key(shortcode))
            pipe.lrange(self.keys.link_clicks_key(shortcode), 0, -1)
            fields, clicks = pipe.execute()

        if not fields:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")

        return self._to_model(shortcode, fields, clicks)

    @handle_redis_connection_error
    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        """Check whether a short URL with the given shortcode is stored in Redis"""
        return bool(self.redis.exists(self.keys.link_key(shortcode)))

    @handle_redis_connection_error
    @beartype
    def hit(self, shortcode: str, click: ClickEventModel, **kwargs) -> ShortURLModel:
        """Increment the click counter and append the click event to the history.

        NOTE: HINCRBY and RPUSH run in one Lua script together with the
              existence check. Concurrent hits are serialized by Redis, so no
              increment or event is lost, and a link evicted in between is
              never resurrected as a partial hash.

        Args:
            shortcode (str):
                The short code of the clicked short URL.
            click (ClickEventModel):
                Click event to append.

        Returns:
            ShortURLModel:
                The short URL as stored right after the click.

        Raises:
            ShortURLNotFoundError:
                If no short URL with the given short code exists.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        clicks = self._hit_script(
            keys=[self.keys.link_key(shortcode), self.keys.link_clicks_key(shortcode)],
            args=[json.dumps(click.to_dict())],
        )
        if clicks is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")

        return self.get(shortcode)

    @handle_redis_connection_error
    @beartype
    def all(self, **kwargs) -> list[ShortURLModel]:
        """Return every short URL stored in Redis, oldest first

        Index entries whose link was already evicted by Redis are skipped and
        pruned from the index.
        """
        shortcodes = self.redis.zrange(self.keys.index_key(), 0, -1)
        if not shortcodes:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for shortcode in shortcodes:
                pipe.hgetall(self.keys.link_key(shortcode))
                pipe.lrange(self.keys.link_clicks_key(shortcode), 0, -1)
            results = pipe.execute()

        short_urls, evicted = [], []
        for shortcode, fields, clicks in zip(shortcodes, results[::2], results[1::2]):
            if not fields:
                evicted.append(shortcode)
                continue
            short_urls.append(self._to_model(shortcode, fields, clicks))

        if evicted:
            self._prune_script(
                keys=[self.keys.index_key(), *(self.keys.link_key(shortcode) for shortcode in evicted)],
                args=evicted,
            )
        return short_urls

    @handle_redis_connection_error
    @beartype
    def delete(self, shortcode: str, **kwargs) -> 'ShortURLRedisDAO':
        """Remove a short URL, its click history and its index entry from Redis

        Raises:
            ShortURLNotFoundError:
                If no short URL with the given short code exists.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.delete(self.keys.link_key(shortcode))
            pipe.delete(self.keys.link_clicks_key(shortcode))
            pipe.zrem(self.keys.index_key(), shortcode)
            deleted, _, _ = pipe.execute()

        if not deleted:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return self

    @staticmethod
    def _to_millis(moment: datetime) -> int:
        return int(moment.timestamp() * 1000)

    @staticmethod
    def _to_model(shortcode: str, fields: dict[str, str], clicks: list[str]) -> ShortURLModel:
        expires_at = fields.get('expires_at')
        return ShortURLModel(
            target=fields['target'],
            shortcode=shortcode,
            created_at=parse_isoformat(fields['created_at']),
            expires_at=parse_isoformat(expires_at) if expires_at else None,
            clicks=int(fields.get('clicks', 0)),
            click_history=tuple(ClickEventModel.from_dict(json.loads(click)) for click in clicks),
        )
