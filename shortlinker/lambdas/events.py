"""Helpers extracting request data from API Gateway events

Supports both REST API (payload v1) and HTTP API (payload v2) events.
"""

from shortlinker.models import RequestContext
from shortlinker.types import LambdaEvent


def path_shortcode(event: LambdaEvent) -> str | None:
    """Return the `shortcode` path parameter, or None if the route has none."""
    return (event.get('pathParameters') or {}).get('shortcode')


def request_context(event: LambdaEvent) -> RequestContext:
    """Describe the requester of a redirect from the event's headers and source IP.

    Example:
        >>> request_context({
        ...     'headers': {'User-Agent': 'curl/8.5.0'},
        ...     'requestContext': {'identity': {'sourceIp': '203.0.113.7'}},
        ... })
        RequestContext(referrer=None, user_agent='curl/8.5.0', ip='203.0.113.7')
    """
    # header names are case-insensitive (and lowercased by HTTP APIs)
    headers = {name.lower(): value for name, value in (event.get('headers') or {}).items()}
    context = event.get('requestContext') or {}
    ip = (context.get('identity') or {}).get('sourceIp') or (context.get('http') or {}).get('sourceIp')

    return RequestContext(
        referrer=headers.get('referer') or headers.get('referrer'),
        user_agent=headers.get('user-agent'),
        ip=ip,
    )
