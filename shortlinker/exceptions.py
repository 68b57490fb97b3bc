"""Application-level exceptions raised by the short URL lifecycle.

Every exception carries a stable `error_code`, which Lambda handlers copy into
the `errorCode` field of their JSON error responses.

Classes:
    ShortLinkerError:
        Base class for all application-specific errors.

    ValidationError:
        Caller input errors (MissingURLError, InvalidURLError,
        InvalidValidityError, InvalidShortcodeError).

    ShortcodeConflictError:
        Requested shortcode is already taken.

    ShortcodeGenerationError:
        Random shortcode generation exhausted its retry budget.

    LookupFailedError:
        Shortcode can't be resolved (ShortURLNotFoundError, ShortURLExpiredError).

    ConfigurationError:
        Application is misconfigured (MissingEnvironmentVariableError,
        BadConfigurationError).
"""


class ShortLinkerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'SHORTLINKER_ERROR'


class ValidationError(ShortLinkerError):
    """Base exception for invalid client input."""

    error_code = 'VALIDATION_ERROR'


class MissingURLError(ValidationError):
    """Raised when a create request doesn't provide the original URL."""

    error_code = 'MISSING_URL'


class InvalidURLError(ValidationError):
    """Raised when the original URL is not an absolute URL."""

    error_code = 'INVALID_URL'


class InvalidValidityError(ValidationError):
    """Raised when the requested validity is present but not a positive number."""

    error_code = 'INVALID_VALIDITY'


class InvalidShortcodeError(ValidationError):
    """Raised when a custom shortcode is not 5-10 alphanumeric characters."""

    error_code = 'INVALID_SHORTCODE'


class ShortcodeConflictError(ShortLinkerError):
    """Raised when a custom shortcode is already in use."""

    error_code = 'SHORTCODE_CONFLICT'


class ShortcodeGenerationError(ShortLinkerError):
    """Raised when no unique shortcode could be generated within the attempt budget."""

    error_code = 'SHORTCODE_GENERATION_EXHAUSTED'


class LookupFailedError(ShortLinkerError):
    """Base exception for shortcodes which can't be resolved."""

    error_code = 'LOOKUP_FAILED'


class ShortURLNotFoundError(LookupFailedError):
    """Raised when no record exists for a shortcode (never created or already evicted)."""

    error_code = 'SHORT_URL_NOT_FOUND'


class ShortURLExpiredError(LookupFailedError):
    """Raised when a record exists but its validity window has passed."""

    error_code = 'SHORT_URL_EXPIRED'


class ConfigurationError(ShortLinkerError):
    """Base exception for all configuration errors."""

    error_code = 'CONFIGURATION_ERROR'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'MISSING_ENVIRONMENT_VARIABLE'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'BAD_CONFIGURATION'
