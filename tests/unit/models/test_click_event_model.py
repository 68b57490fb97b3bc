from datetime import datetime, timedelta, timezone, UTC

from shortlinker.models import ClickEventModel, RequestContext


def test_to_dict():
    click = ClickEventModel(
        timestamp=datetime(2025, 10, 15, 12, 0, 0, 123456, tzinfo=UTC),
        source='curl/8.5.0',
        location='203.0.113.7',
    )

    assert click.to_dict() == {
        'timestamp': '2025-10-15T12:00:00.123Z',
        'source': 'curl/8.5.0',
        'location': '203.0.113.7',
    }


def test_to_dict_converts_to_utc():
    cest = timezone(timedelta(hours=2))
    click = ClickEventModel(timestamp=datetime(2025, 10, 15, 14, 0, tzinfo=cest), source='unknown', location='unknown')

    assert click.to_dict()['timestamp'] == '2025-10-15T12:00:00.000Z'


def test_from_dict():
    click = ClickEventModel.from_dict(
        {'timestamp': '2025-10-15T12:00:00.000Z', 'source': 'https://t.co/', 'location': 'unknown'},
    )

    assert click.timestamp == datetime(2025, 10, 15, 12, 0, tzinfo=UTC)
    assert click.source == 'https://t.co/'
    assert click.location == 'unknown'


def test_request_context_defaults():
    assert RequestContext() == RequestContext(referrer=None, user_agent=None, ip=None)
