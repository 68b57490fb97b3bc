from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from shortlinker.models.click_event_model import ClickEventModel
from shortlinker.utils.helpers import isoformat_utc


@dataclass(frozen=True)
class ShortURLModel:
    """Represent a shortened URL mapping and its click analytics.

    Attributes:
        target (str):
            The original long URL that the short code redirects to.
        shortcode (str):
            The unique short identifier representing the shortened URL.
        created_at (datetime):
            When the short URL was created (UTC).
        expires_at (Optional[datetime]):
            Moment after which the short URL is no longer resolvable.
            None means the short URL never expires.
        clicks (int):
            Number of recorded redirects. Always equals len(click_history).
        click_history (tuple[ClickEventModel, ...]):
            Recorded redirects in chronological order.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> now = datetime(2025, 10, 15, 12, 0, tzinfo=UTC)
        >>> url = ShortURLModel(
        ...     target="https://example.com/article/123",
        ...     shortcode="abc12",
        ...     created_at=now,
        ...     expires_at=now + timedelta(minutes=30),
        ... )
        >>> url.clicks
        0
        >>> url.summary_view()['expiresAt']
        '2025-10-15T12:30:00.000Z'
    """

    target: str
    shortcode: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    clicks: int = 0
    click_history: tuple[ClickEventModel, ...] = ()

    def created_view(self) -> dict[str, Any]:
        """Public view returned right after creation."""
        return {
            'shortCode': self.shortcode,
            'originalUrl': self.target,
            'expiry': isoformat_utc(self.expires_at),
        }

    def summary_view(self) -> dict[str, Any]:
        """Public view used in listings (no click history)."""
        return {
            'shortCode': self.shortcode,
            'originalUrl': self.target,
            'createdAt': isoformat_utc(self.created_at),
            'expiresAt': isoformat_utc(self.expires_at),
            'totalClicks': self.clicks,
        }

    def stats_view(self) -> dict[str, Any]:
        """Public view with the full click history."""
        return {
            **self.summary_view(),
            'clickHistory': [click.to_dict() for click in self.click_history],
        }
