from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from shortlinker.utils.helpers import isoformat_utc, parse_isoformat


@dataclass(frozen=True)
class RequestContext:
    """What the transport layer knows about a redirect request.

    Attributes:
        referrer (Optional[str]):
            Value of the Referer header, if any.
        user_agent (Optional[str]):
            Value of the User-Agent header, if any.
        ip (Optional[str]):
            Raw address of the requester as seen by the transport.
    """

    referrer: Optional[str] = None
    user_agent: Optional[str] = None
    ip: Optional[str] = None


@dataclass(frozen=True)
class ClickEventModel:
    """Represent one redirect of a short URL.

    Attributes:
        timestamp (datetime):
            When the redirect happened (UTC).
        source (str):
            Referring context: referrer, else user agent, else 'unknown'.
        location (str):
            Coarse requester identifier (raw connection address). This is not
            a geolocation.

    Example:
        >>> from datetime import datetime, UTC
        >>> click = ClickEventModel(
        ...     timestamp=datetime(2025, 10, 15, 12, 0, tzinfo=UTC),
        ...     source='https://news.ycombinator.com/',
        ...     location='203.0.113.7',
        ... )
        >>> click.to_dict()['timestamp']
        '2025-10-15T12:00:00.000Z'
    """

    timestamp: datetime
    source: str
    location: str

    def to_dict(self) -> dict[str, Any]:
        return {
            'timestamp': isoformat_utc(self.timestamp),
            'source': self.source,
            'location': self.location,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'ClickEventModel':
        return cls(
            timestamp=parse_isoformat(data['timestamp']),
            source=data['source'],
            location=data['location'],
        )
