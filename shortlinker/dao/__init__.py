from shortlinker.dao.base import ShortURLBaseDAO
from shortlinker.dao.memory import ShortURLMemoryDAO
from shortlinker.dao.redis import ShortURLRedisDAO
from shortlinker.dao.factory import build_short_url_dao


__all__ = [
    'ShortURLBaseDAO',
    'ShortURLMemoryDAO',
    'ShortURLRedisDAO',
    'build_short_url_dao',
]
