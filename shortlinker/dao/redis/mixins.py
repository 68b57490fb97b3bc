"""Shared Redis client wiring for the short URL DAO

`RedisClientMixin` owns the client (given, or built from connection
parameters), the key schema for the deployment's prefix, and a PING issued
at construction so a misconfigured data store fails the request up front
with a DataStoreError instead of on the first command.

Example:
    >>> class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    ...     pass
    ...
    >>> dao = ShortURLRedisDAO(prefix="shortlinker:prod")
    >>> dao.keys.link_key("abc12")
    'shortlinker:prod:links:abc12'
"""

from typing import Optional

import redis

from shortlinker.dao.redis.redis_key_schema import RedisKeySchema
from shortlinker.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Client and key schema for Redis-backed DAOs.

    Attributes:
        redis (redis.Redis): client every DAO command goes through.
        keys (RedisKeySchema): builds the prefixed link, clicks and index keys.
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        """Use `redis_client` if given, otherwise connect with the `redis_*` parameters.

        Port and db may arrive as strings from AppConfig and are cast to int.

        Raises:
            DataStoreError: if Redis doesn't answer the PING.
        """
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self) -> None:
        """PING Redis, raising DataStoreError with the target address if it is unreachable"""
        try:
            self.redis.ping()
        except redis.exceptions.ConnectionError as e:
            info = self.redis.connection_pool.connection_kwargs
            raise DataStoreError(
                f"Can't connect to Redis at {info.get('host')}:{info.get('port')}/{info.get('db')}. "
                'Check the provided configuration parameters.'
            ) from e
