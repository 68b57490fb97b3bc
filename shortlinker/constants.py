from enum import StrEnum


class TTL:
    """TTL durations in seconds."""

    # How long an expired link stays in Redis (answering 410 Gone) before it is evicted
    ONE_DAY = 86_400  # 60 * 60 * 24


class Lifecycle:
    """Short URL lifecycle defaults."""

    DEFAULT_VALIDITY_MINUTES = 30  # Assigned when a client doesn't request a validity
    SHORTCODE_LENGTH = 5  # Length of generated shortcodes
    MIN_SHORTCODE_LENGTH = 5  # Custom shortcodes: minimum length
    MAX_SHORTCODE_LENGTH = 10  # Custom shortcodes: maximum length
    MAX_GENERATION_ATTEMPTS = 5  # Random shortcode collisions tolerated per create
    MIN_VALIDITY_MINUTES = 1 / 60_000  # One millisecond, the resolution of stored timestamps
    MAX_VALIDITY_MINUTES = 5_256_000  # Ten years (60 * 24 * 365 * 10)
    EVICTION_GRACE_SECONDS = TTL.ONE_DAY
    UNKNOWN = 'unknown'  # Click source/location sentinel


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
DATA_STORE_ERROR = 'DATA_STORE_ERROR'
