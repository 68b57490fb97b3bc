"""Short URL lifecycle orchestration

ShortURLService ties the shortcode generator, the expiry policy and the click
recorder to a DAO, and implements the operations exposed by the lambdas:

    create      -> new short URL (the only way a short URL comes to exist)
    stats       -> short URL with its full click history
    redirect    -> target URL, recording a click on the way
    list_all    -> every stored short URL (expired but not yet evicted included)
    delete      -> operator removal of a short URL

Lifecycle of a short URL:

    absent --create--> active --time passes--> expired
                         |                        |
                         +------evict/delete------+--> deleted (== absent)

No code runs on the active -> expired transition: expiry is evaluated on
every read against the service's clock.

Errors (see shortlinker.exceptions):
    MissingURLError, InvalidURLError, InvalidValidityError, InvalidShortcodeError
    ShortcodeConflictError, ShortcodeGenerationError
    ShortURLNotFoundError (never created / evicted), ShortURLExpiredError (expired)
    DataStoreError propagates untouched from the DAO.

Example:
    >>> from shortlinker.dao import ShortURLMemoryDAO
    >>> service = ShortURLService(ShortURLMemoryDAO())
    >>> short_url = service.create('https://example.com/a', validity=1)
    >>> service.redirect(short_url.shortcode, RequestContext(ip='203.0.113.7'))
    'https://example.com/a'
    >>> service.stats(short_url.shortcode).clicks
    1
"""

import logging
import urllib.parse
from datetime import datetime, UTC
from typing import Any, Optional
from collections.abc import Callable

from shortlinker.constants import Lifecycle
from shortlinker.dao import exceptions as dao_errors
from shortlinker.dao.base import ShortURLBaseDAO
from shortlinker.exceptions import (
    MissingURLError,
    InvalidURLError,
    ShortcodeConflictError,
    ShortcodeGenerationError,
    ShortURLNotFoundError,
    ShortURLExpiredError,
)
from shortlinker.lifecycle.clicks import record_click
from shortlinker.lifecycle.expiry import compute_expiry, is_expired, validate_validity
from shortlinker.lifecycle.shortcodes import ensure_shortcode_available, generate_shortcode, validate_custom_shortcode
from shortlinker.models import RequestContext, ShortURLModel


def utcnow() -> datetime:
    return datetime.now(UTC)


def validate_target_url(target_url: Any) -> str:
    """Return the URL (stripped of surrounding whitespace) if it is an absolute URL.

    Raises:
        MissingURLError: if the URL is absent or blank.
        InvalidURLError: if the URL lacks a scheme or a host, or contains whitespace.
    """
    if target_url is None or (isinstance(target_url, str) and not target_url.strip()):
        raise MissingURLError('Original URL is required.')
    if not isinstance(target_url, str):
        raise InvalidURLError(f'Invalid URL format (given value: {target_url!r}).')

    target_url = target_url.strip()
    try:
        components = urllib.parse.urlparse(target_url)
        hostname = components.hostname
    except ValueError as e:
        raise InvalidURLError(f'Invalid URL format (given value: {target_url!r}).') from e

    if not components.scheme or not hostname or any(char.isspace() for char in target_url):
        raise InvalidURLError(f'Invalid URL format (given value: {target_url!r}).')
    return target_url


class ShortURLService:
    """Create, resolve and account short URLs on top of a ShortURLBaseDAO

    Attributes:
        dao (ShortURLBaseDAO):
            Storage for short URLs. Its insert() is the authority on shortcode uniqueness.
        logger (logging.Logger):
            Sink for lifecycle events. Defaults to this module's logger.
        clock (Callable[[], datetime]):
            Source of "now" (UTC) for creation, expiry checks and click timestamps.
        default_validity_minutes (int | float):
            Validity assigned when the client doesn't request one.
        shortcode_length (int):
            Length of generated shortcodes.
        max_generation_attempts (int):
            Generated shortcodes tried before giving up with ShortcodeGenerationError.
    """

    def __init__(
        self,
        dao: ShortURLBaseDAO,
        *,
        logger: Optional[logging.Logger] = None,
        clock: Optional[Callable[[], datetime]] = None,
        default_validity_minutes: int | float = Lifecycle.DEFAULT_VALIDITY_MINUTES,
        shortcode_length: int = Lifecycle.SHORTCODE_LENGTH,
        max_generation_attempts: int = Lifecycle.MAX_GENERATION_ATTEMPTS,
    ):
        self.dao = dao
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock or utcnow
        self.default_validity_minutes = default_validity_minutes
        self.shortcode_length = shortcode_length
        self.max_generation_attempts = max_generation_attempts

    @classmethod
    def from_config(cls, dao: ShortURLBaseDAO, lifecycle: dict[str, Any], **kwargs) -> 'ShortURLService':
        """Build a service from the 'lifecycle' section of the app config; missing keys use defaults."""
        return cls(
            dao,
            default_validity_minutes=lifecycle.get('default_validity_minutes', Lifecycle.DEFAULT_VALIDITY_MINUTES),
            shortcode_length=lifecycle.get('shortcode_length', Lifecycle.SHORTCODE_LENGTH),
            max_generation_attempts=lifecycle.get('max_generation_attempts', Lifecycle.MAX_GENERATION_ATTEMPTS),
            **kwargs,
        )

    def create(self, target_url: Any, validity: Any = None, shortcode: Optional[str] = None) -> ShortURLModel:
        """Create a short URL for `target_url`.

        Steps:
        - Step 1: Validate the target URL (MissingURLError / InvalidURLError)
        - Step 2: Validate the requested validity (InvalidValidityError)
        - Step 3: Compute the expiry (requested validity, else the default)
        - Step 4: Insert under the custom shortcode, or a generated one

        Args:
            target_url: Original URL, must be absolute.
            validity: Optional validity in minutes (positive number).
            shortcode: Optional custom shortcode (5-10 alphanumeric characters).
                An empty string counts as not given.

        Returns:
            ShortURLModel: the stored short URL, with no clicks.

        Raises:
            MissingURLError, InvalidURLError, InvalidValidityError,
            InvalidShortcodeError, ShortcodeConflictError,
            ShortcodeGenerationError, DataStoreError
        """
        target_url = validate_target_url(target_url)
        validity = validate_validity(validity)

        now = self.clock()
        expires_at = compute_expiry(validity, now, default_minutes=self.default_validity_minutes)

        if shortcode:
            short_url = self._insert_custom(target_url, shortcode, now, expires_at)
        else:
            short_url = self._insert_generated(target_url, now, expires_at)

        self.logger.info(
            'Short URL created.',
            extra={'shortcode': short_url.shortcode, 'target': target_url, 'expiresAt': expires_at},
        )
        return short_url

    def stats(self, shortcode: str) -> ShortURLModel:
        """Return the short URL with its click history.

        Raises:
            ShortURLNotFoundError: if no short URL with this code is stored.
            ShortURLExpiredError: if the short URL is stored but expired.
        """
        return self._resolve(shortcode, self.clock())

    def redirect(self, shortcode: str, context: RequestContext) -> str:
        """Record a click on the short URL and return its target.

        Expired short URLs are not clicked.

        Raises:
            ShortURLNotFoundError: if no short URL with this code is stored
                (or it got evicted before the click was recorded).
            ShortURLExpiredError: if the short URL is stored but expired.
        """
        now = self.clock()
        short_url = self._resolve(shortcode, now)

        try:
            clicked = record_click(self.dao, shortcode, context, now)
        except dao_errors.ShortURLNotFoundError as e:
            # evicted between lookup and click
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.") from e

        self.logger.debug('Click recorded.', extra={'shortcode': shortcode, 'clicks': clicked.clicks})
        return clicked.target

    def list_all(self) -> list[ShortURLModel]:
        """Return every stored short URL in storage order, expired ones included."""
        return self.dao.all()

    def delete(self, shortcode: str) -> None:
        """Remove a short URL; its shortcode becomes available again.

        Raises:
            ShortURLNotFoundError: if no short URL with this code is stored.
        """
        try:
            self.dao.delete(shortcode)
        except dao_errors.ShortURLNotFoundError as e:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.") from e
        self.logger.info('Short URL deleted.', extra={'shortcode': shortcode})

    def _resolve(self, shortcode: str, now: datetime) -> ShortURLModel:
        try:
            short_url = self.dao.get(shortcode)
        except dao_errors.ShortURLNotFoundError as e:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.") from e

        if is_expired(short_url, now):
            raise ShortURLExpiredError(f"Short URL with code '{shortcode}' expired at {short_url.expires_at.isoformat()}.")
        return short_url

    def _insert_custom(self, target_url: str, shortcode: str, now: datetime, expires_at: datetime) -> ShortURLModel:
        validate_custom_shortcode(shortcode)
        ensure_shortcode_available(self.dao, shortcode)

        short_url = ShortURLModel(target=target_url, shortcode=shortcode, created_at=now, expires_at=expires_at)
        try:
            self.dao.insert(short_url)
        except dao_errors.ShortURLAlreadyExistsError as e:
            # lost the race against a concurrent create with the same shortcode
            raise ShortcodeConflictError(f"Shortcode '{shortcode}' is already in use.") from e
        return short_url

    def _insert_generated(self, target_url: str, now: datetime, expires_at: datetime) -> ShortURLModel:
        for attempt in range(1, self.max_generation_attempts + 1):
            shortcode = generate_shortcode(self.shortcode_length)
            if self.dao.exists(shortcode):
                self.logger.debug('Generated shortcode already in use.', extra={'shortcode': shortcode, 'attempt': attempt})
                continue

            short_url = ShortURLModel(target=target_url, shortcode=shortcode, created_at=now, expires_at=expires_at)
            try:
                self.dao.insert(short_url)
            except dao_errors.ShortURLAlreadyExistsError:
                self.logger.debug('Generated shortcode taken concurrently.', extra={'shortcode': shortcode, 'attempt': attempt})
                continue
            return short_url

        self.logger.error(
            'Failed to generate a unique shortcode.',
            extra={'attempts': self.max_generation_attempts},
        )
        raise ShortcodeGenerationError(
            f'Failed to generate a unique shortcode after {self.max_generation_attempts} attempts. Please try again.'
        )
