from shortlinker.utils.config import app_env, app_name, project_root, app_prefix, load_config
from shortlinker.utils.helpers import (
    base_url,
    get_short_url,
    isoformat_utc,
    parse_isoformat,
    require_environment,
    guarantee_500_response,
)
from shortlinker.utils.logging import initialize_logging


__all__ = [
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'base_url',
    'get_short_url',
    'isoformat_utc',
    'parse_isoformat',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
