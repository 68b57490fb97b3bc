"""Build the short URL DAO selected by the application's configuration

The lambda's config section (see shortlinker.utils.config.load_config) holds
exactly one backend key next to the shared 'lifecycle' section:

    {'redis': {'host': ..., 'port': ..., 'db': ...}, 'lifecycle': {...}}
    {'memory': {}, 'lifecycle': {...}}

Redis settings are passed to ShortURLRedisDAO as `redis_<name>` keyword
arguments. The memory backend is shared by every lambda running in the same
process, so that links created by one handler resolve in another.
"""

import logging

from shortlinker.constants import Lifecycle
from shortlinker.exceptions import BadConfigurationError
from shortlinker.types import LambdaConfiguration
from shortlinker.dao.base import ShortURLBaseDAO
from shortlinker.dao.memory import ShortURLMemoryDAO
from shortlinker.dao.redis import ShortURLRedisDAO


logger = logging.getLogger(__name__)

_memory_dao = ShortURLMemoryDAO()


def build_short_url_dao(app_config: LambdaConfiguration, prefix: str | None = None) -> ShortURLBaseDAO:
    """Instantiate the DAO for the configured backend

    Args:
        app_config (dict):
            Lambda configuration as returned by load_config().
        prefix (str | None):
            Key namespace for backends which support it (e.g. 'shortlinker:dev').

    Returns:
        ShortURLBaseDAO: a ready-to-use DAO.

    Raises:
        BadConfigurationError:
            If no supported backend is configured.
        DataStoreError:
            If the backend is unreachable.
    """
    lifecycle = app_config.get('lifecycle', {})

    if 'redis' in app_config:
        logger.debug('Using Redis as the backend database for short URLs')
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
        grace = lifecycle.get('eviction_grace_seconds', Lifecycle.EVICTION_GRACE_SECONDS)
        return ShortURLRedisDAO(**redis_config, prefix=prefix, eviction_grace_seconds=grace)

    if 'memory' in app_config:
        logger.debug('Using in-process memory as the backend database for short URLs')
        return _memory_dao

    backends = sorted(key for key in app_config if key != 'lifecycle')
    raise BadConfigurationError(f'Unsupported short URL backend(s): {backends}')
