"""Expiry policy for short URLs

A short URL is *logically expired* once its `expires_at` moment has been
reached. Logical expiry is evaluated on every read and doesn't depend on the
data store having evicted the record yet.

Functions:
    validate_validity(validity) -> float | None:
        Reject a requested validity that is present but not a number of minutes
        between one millisecond and ten years.

    compute_expiry(validity_minutes, now, default_minutes=30) -> datetime:
        Expiry moment for a short URL created at `now`.

    is_expired(short_url, now) -> bool:
        True iff the short URL has an expiry and it is at or before `now`.
"""

import math
from datetime import datetime, timedelta
from typing import Any

from shortlinker.constants import Lifecycle
from shortlinker.exceptions import InvalidValidityError
from shortlinker.models import ShortURLModel


def _is_valid_validity(value: Any) -> bool:
    # bool is an int subclass, but `true` is not a validity
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and Lifecycle.MIN_VALIDITY_MINUTES <= value <= Lifecycle.MAX_VALIDITY_MINUTES


def validate_validity(validity: Any) -> int | float | None:
    """Return the requested validity (in minutes) if it is absent or a positive number within bounds.

    The lower bound (one millisecond) keeps `expires_at` strictly after
    `created_at`. The upper bound (ten years) keeps `expires_at` representable.

    Raises:
        InvalidValidityError: for zero, negative, non-finite, non-numeric or out of range values.

    Example:
        >>> validate_validity(None) is None
        True
        >>> validate_validity(15)
        15
        >>> validate_validity('15')
        InvalidValidityError: Validity must be a positive number of minutes, at most 5256000 (given value: '15').
    """
    if validity is None or _is_valid_validity(validity):
        return validity
    raise InvalidValidityError(
        f'Validity must be a positive number of minutes, at most {Lifecycle.MAX_VALIDITY_MINUTES} '
        f'(given value: {validity!r}).'
    )


def compute_expiry(
    validity_minutes: Any,
    now: datetime,
    default_minutes: int | float = Lifecycle.DEFAULT_VALIDITY_MINUTES,
) -> datetime:
    """Compute the expiry moment of a short URL created at `now`.

    A valid number of minutes is honored as is. Anything else (absent, zero,
    out of range, invalid) falls back to `default_minutes`, so a short URL
    created through this policy always expires.
    """
    minutes = validity_minutes if _is_valid_validity(validity_minutes) else default_minutes
    return now + timedelta(minutes=minutes)


def is_expired(short_url: ShortURLModel, now: datetime) -> bool:
    """Return True iff `short_url` has an expiry at or before `now`."""
    return short_url.expires_at is not None and short_url.expires_at <= now
