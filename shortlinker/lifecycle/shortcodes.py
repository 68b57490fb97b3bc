"""Shortcode generation and validation

Functions:
    generate_shortcode(length=5) -> str:
        Draw a random Base62 shortcode from a cryptographically secure source.

    validate_custom_shortcode(shortcode) -> str:
        Ensure a client-chosen shortcode is 5-10 alphanumeric characters.

    ensure_shortcode_available(dao, shortcode) -> str:
        Ensure no stored short URL (expired or not) uses the shortcode.

Example:
    >>> from shortlinker.lifecycle.shortcodes import generate_shortcode
    >>> code = generate_shortcode()
    >>> len(code)
    5

NOTE:
    - With 62**5 (~916M) possible codes, collisions are rare but not
      impossible. Callers retry a bounded number of times
      (see ShortURLService.create) instead of looping forever.
    - Availability checks are an optimization. The DAO's insert is the
      authority on uniqueness.
"""

import re
import string
import secrets

from shortlinker.constants import Lifecycle
from shortlinker.dao.base import ShortURLBaseDAO
from shortlinker.exceptions import InvalidShortcodeError, ShortcodeConflictError


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
SHORTCODE_PATTERN = re.compile(rf'^[A-Za-z0-9]{{{Lifecycle.MIN_SHORTCODE_LENGTH},{Lifecycle.MAX_SHORTCODE_LENGTH}}}$')


def generate_shortcode(length: int = Lifecycle.SHORTCODE_LENGTH) -> str:
    """Generate a random alphanumeric shortcode.

    Args:
        length (int, optional):
            Number of characters. Defaults to 5.

    Returns:
        str: `length` characters drawn uniformly from [a-zA-Z0-9].

    Raises:
        ValueError: if length is not a positive integer.
    """
    if length <= 0:
        raise ValueError(f'Shortcode length must be a positive integer (given value: {length}).')
    return ''.join(secrets.choice(ALPHABET) for _ in range(length))


def validate_custom_shortcode(shortcode: str) -> str:
    """Return the shortcode if it is 5-10 alphanumeric characters.

    Raises:
        InvalidShortcodeError: for any other value (including non-strings).
    """
    if not isinstance(shortcode, str) or not SHORTCODE_PATTERN.fullmatch(shortcode):
        raise InvalidShortcodeError(
            f'Custom shortcode must be {Lifecycle.MIN_SHORTCODE_LENGTH}-{Lifecycle.MAX_SHORTCODE_LENGTH} '
            f'alphanumeric characters (given value: {shortcode!r}).'
        )
    return shortcode


def ensure_shortcode_available(dao: ShortURLBaseDAO, shortcode: str) -> str:
    """Return the shortcode if no stored short URL uses it.

    Expired short URLs which haven't been evicted yet still hold their code.

    Raises:
        ShortcodeConflictError: if the shortcode is taken.
        DataStoreError: if the DAO can't reach its data store.
    """
    if dao.exists(shortcode):
        raise ShortcodeConflictError(f"Shortcode '{shortcode}' is already in use.")
    return shortcode
