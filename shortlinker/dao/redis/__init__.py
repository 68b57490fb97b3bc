from shortlinker.dao.redis.redis_key_schema import RedisKeySchema
from shortlinker.dao.redis.mixins import RedisClientMixin
from shortlinker.dao.redis.short_url_redis_dao import ShortURLRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'ShortURLRedisDAO',
]
