"""Unit tests for ShortURLService

Test coverage includes:

1. Create
   - Generated shortcodes are 5 Base62 characters and unique.
   - Custom shortcodes are stored as given; taken ones raise ShortcodeConflictError.
   - URL, validity and shortcode validation errors.
   - Default and requested expiry.
   - Bounded retries on generated shortcode collisions.

2. Stats / redirect
   - Fresh short URLs have no clicks.
   - Expired short URLs raise ShortURLExpiredError until evicted, then ShortURLNotFoundError.
   - Unknown shortcodes raise ShortURLNotFoundError.
   - Concurrent redirects don't lose clicks.

3. Listing and deletion
   - Every stored short URL is listed once, expired ones included, evicted ones excluded.
"""

import re
import threading
from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from shortlinker.dao.base import ShortURLBaseDAO
from shortlinker.dao.exceptions import DataStoreError, ShortURLAlreadyExistsError
from shortlinker.dao import exceptions as dao_errors
from shortlinker.dao.memory import ShortURLMemoryDAO
from shortlinker.exceptions import (
    MissingURLError,
    InvalidURLError,
    InvalidValidityError,
    InvalidShortcodeError,
    ShortcodeConflictError,
    ShortcodeGenerationError,
    ShortURLNotFoundError,
    ShortURLExpiredError,
)
from shortlinker.lifecycle import service as service_module
from shortlinker.lifecycle import ShortURLService, validate_target_url
from shortlinker.constants import Lifecycle
from shortlinker.models import RequestContext, ShortURLModel


NOW = datetime(2025, 10, 15, 12, 0, tzinfo=UTC)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def dao():
    return ShortURLMemoryDAO()


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def service(dao, clock):
    return ShortURLService(dao, clock=clock)


# -------------------------------
# 1. Create
# -------------------------------


def test_create_with_generated_shortcode(service, dao):
    short_url = service.create('https://example.com/a')

    assert re.fullmatch(r'[A-Za-z0-9]{5}', short_url.shortcode)
    assert short_url.target == 'https://example.com/a'
    assert short_url.created_at == NOW
    assert dao.get(short_url.shortcode) == short_url


def test_generated_shortcodes_are_unique(service):
    shortcodes = [service.create('https://example.com/a').shortcode for _ in range(200)]
    assert len(set(shortcodes)) == len(shortcodes)


def test_create_assigns_default_expiry(service):
    short_url = service.create('https://example.com/a')
    assert short_url.expires_at == NOW + timedelta(minutes=30)


def test_create_with_configured_default_expiry(dao, clock):
    service = ShortURLService.from_config(dao, {'default_validity_minutes': 5}, clock=clock)
    assert service.create('https://example.com/a').expires_at == NOW + timedelta(minutes=5)


@pytest.mark.parametrize('validity, expected', [(1, timedelta(minutes=1)), (0.5, timedelta(seconds=30)), (None, timedelta(minutes=30))])
def test_create_with_validity(service, validity, expected):
    assert service.create('https://example.com/a', validity=validity).expires_at == NOW + expected


def test_create_with_shortest_validity_expires_after_creation(service):
    short_url = service.create('https://example.com/a', validity=Lifecycle.MIN_VALIDITY_MINUTES)
    assert short_url.expires_at == NOW + timedelta(milliseconds=1)
    assert short_url.expires_at > short_url.created_at


def test_create_starts_without_clicks(service):
    short_url = service.stats(service.create('https://example.com/a').shortcode)

    assert short_url.clicks == 0
    assert short_url.click_history == ()


def test_create_with_custom_shortcode(service):
    short_url = service.create('https://example.com/a', shortcode='promo1')

    assert short_url.shortcode == 'promo1'
    assert service.stats('promo1').target == 'https://example.com/a'


def test_create_with_empty_custom_shortcode_generates_one(service):
    assert len(service.create('https://example.com/a', shortcode='').shortcode) == 5


def test_create_with_taken_custom_shortcode(service):
    original = service.create('https://example.com/a', shortcode='promo1')

    with pytest.raises(ShortcodeConflictError, match="Shortcode 'promo1' is already in use."):
        service.create('https://example.com/b', shortcode='promo1')
    assert service.stats('promo1') == original


def test_create_with_custom_shortcode_of_expired_short_url(service, clock):
    service.create('https://example.com/a', validity=1, shortcode='promo1')
    clock.advance(minutes=5)

    with pytest.raises(ShortcodeConflictError):
        service.create('https://example.com/b', shortcode='promo1')


def test_create_with_custom_shortcode_after_eviction(service, dao, clock):
    service.create('https://example.com/a', validity=1, shortcode='promo1')
    clock.advance(minutes=5)
    dao.evict(clock())

    assert service.create('https://example.com/b', shortcode='promo1').target == 'https://example.com/b'


def test_create_with_custom_shortcode_losing_insert_race(clock):
    dao = MagicMock(spec=ShortURLBaseDAO)
    dao.exists.return_value = False
    dao.insert.side_effect = ShortURLAlreadyExistsError("Short URL with code 'promo1' already exists.")

    with pytest.raises(ShortcodeConflictError):
        ShortURLService(dao, clock=clock).create('https://example.com/a', shortcode='promo1')


@pytest.mark.parametrize('shortcode', ['ab', 'abcd', 'abcdefghijk', 'abc-1', 'abc 12'])
def test_create_with_invalid_custom_shortcode(service, dao, shortcode):
    with pytest.raises(InvalidShortcodeError):
        service.create('https://x.com', shortcode=shortcode)
    assert dao.all() == []


@pytest.mark.parametrize('url', [None, '', '   '])
def test_create_without_url(service, url):
    with pytest.raises(MissingURLError, match='Original URL is required.'):
        service.create(url)


@pytest.mark.parametrize('url', ['not-a-url', 'example.com/a', 'https://', 'https://exa mple.com', 'http://[::1', 42])
def test_create_with_invalid_url(service, url):
    with pytest.raises(InvalidURLError):
        service.create(url)


@pytest.mark.parametrize('validity', [0, -1, '10', True, 1e-9, 10**10])
def test_create_with_invalid_validity(service, dao, validity):
    with pytest.raises(InvalidValidityError):
        service.create('https://example.com/a', validity=validity)
    assert dao.all() == []


def test_url_is_validated_before_validity_and_shortcode(service):
    with pytest.raises(InvalidURLError):
        service.create('not-a-url', validity=-1, shortcode='ab')
    with pytest.raises(InvalidValidityError):
        service.create('https://x.com', validity=-1, shortcode='ab')


def test_validate_target_url_strips_whitespace():
    assert validate_target_url('  https://example.com/a  ') == 'https://example.com/a'


def test_create_retries_generated_shortcode_collisions(service, dao, monkeypatch):
    service.create('https://example.com/a', shortcode='taken')
    candidates = iter(['taken', 'taken', 'fresh'])
    monkeypatch.setattr(service_module, 'generate_shortcode', lambda length: next(candidates))

    assert service.create('https://example.com/b').shortcode == 'fresh'


def test_create_retries_generated_shortcode_insert_conflicts(clock, monkeypatch):
    dao = MagicMock(spec=ShortURLBaseDAO)
    dao.exists.return_value = False
    dao.insert.side_effect = [ShortURLAlreadyExistsError('taken'), dao]
    candidates = iter(['first', 'other'])
    monkeypatch.setattr(service_module, 'generate_shortcode', lambda length: next(candidates))

    assert ShortURLService(dao, clock=clock).create('https://example.com/a').shortcode == 'other'
    assert dao.insert.call_count == 2


def test_create_gives_up_after_max_generation_attempts(dao, clock, monkeypatch):
    service = ShortURLService(dao, clock=clock, max_generation_attempts=3)
    service.create('https://example.com/a', shortcode='taken')
    generator = MagicMock(return_value='taken')
    monkeypatch.setattr(service_module, 'generate_shortcode', generator)

    with pytest.raises(ShortcodeGenerationError, match='after 3 attempts'):
        service.create('https://example.com/b')
    assert generator.call_count == 3


def test_create_propagates_data_store_errors(clock):
    dao = MagicMock(spec=ShortURLBaseDAO)
    dao.exists.side_effect = DataStoreError("Can't connect to Redis at redis.test:6379/0.")

    with pytest.raises(DataStoreError):
        ShortURLService(dao, clock=clock).create('https://example.com/a')


def test_create_uses_configured_shortcode_length(dao, clock):
    service = ShortURLService.from_config(dao, {'shortcode_length': 8}, clock=clock)
    assert len(service.create('https://example.com/a').shortcode) == 8


# -------------------------------
# 2. Stats / redirect
# -------------------------------


def test_redirect_records_click(service, clock):
    shortcode = service.create('https://example.com/a').shortcode
    clock.advance(seconds=10)

    target = service.redirect(shortcode, RequestContext(referrer='https://t.co/', ip='203.0.113.7'))

    assert target == 'https://example.com/a'
    stats = service.stats(shortcode)
    assert stats.clicks == 1
    click = stats.click_history[0]
    assert click.timestamp == NOW + timedelta(seconds=10)
    assert click.source == 'https://t.co/'
    assert click.location == '203.0.113.7'


def test_stats_does_not_record_clicks(service):
    shortcode = service.create('https://example.com/a').shortcode
    service.stats(shortcode)
    assert service.stats(shortcode).clicks == 0


@pytest.mark.parametrize('operation', ['stats', 'redirect'])
def test_unknown_shortcode(service, operation):
    args = ('nope1', RequestContext()) if operation == 'redirect' else ('nope1',)
    with pytest.raises(ShortURLNotFoundError, match="Short URL with code 'nope1' not found."):
        getattr(service, operation)(*args)


@pytest.mark.parametrize('operation', ['stats', 'redirect'])
def test_expired_shortcode_before_eviction(service, dao, clock, operation):
    shortcode = service.create('https://example.com/a', validity=1).shortcode
    clock.advance(minutes=1)
    args = (shortcode, RequestContext()) if operation == 'redirect' else (shortcode,)

    with pytest.raises(ShortURLExpiredError):
        getattr(service, operation)(*args)
    # still stored, and no click was recorded
    assert dao.get(shortcode).clicks == 0


def test_expired_shortcode_after_eviction(service, dao, clock):
    shortcode = service.create('https://example.com/a', validity=1).shortcode
    clock.advance(minutes=2)
    dao.evict(clock())

    with pytest.raises(ShortURLNotFoundError):
        service.stats(shortcode)


def test_stats_gone_after_validity_window():
    with freeze_time('2025-10-15 12:00:00') as frozen:
        service = ShortURLService(ShortURLMemoryDAO())
        short_url = service.create('https://example.com/a', validity=1)

        assert short_url.expires_at == datetime(2025, 10, 15, 12, 1, tzinfo=UTC)
        assert service.stats(short_url.shortcode).target == 'https://example.com/a'

        frozen.tick(timedelta(seconds=61))
        with pytest.raises(ShortURLExpiredError):
            service.stats(short_url.shortcode)


def test_redirect_on_short_url_evicted_before_click(clock):
    dao = ShortURLMemoryDAO()
    service = ShortURLService(dao, clock=clock)
    shortcode = service.create('https://example.com/a').shortcode

    original_hit = dao.hit

    def evict_then_hit(*args, **kwargs):
        dao.delete(shortcode)
        return original_hit(*args, **kwargs)

    dao.hit = evict_then_hit
    with pytest.raises(ShortURLNotFoundError):
        service.redirect(shortcode, RequestContext())


def test_redirect_follows_short_url_recreated_before_click(clock):
    dao = ShortURLMemoryDAO()
    service = ShortURLService(dao, clock=clock)
    shortcode = service.create('https://example.com/old', shortcode='promo1').shortcode

    original_hit = dao.hit

    def recreate_then_hit(*args, **kwargs):
        dao.delete(shortcode)
        dao.insert(ShortURLModel(
            target='https://example.com/new',
            shortcode=shortcode,
            created_at=NOW,
            expires_at=NOW + timedelta(minutes=30),
        ))
        return original_hit(*args, **kwargs)

    dao.hit = recreate_then_hit
    assert service.redirect(shortcode, RequestContext()) == 'https://example.com/new'
    assert dao.get(shortcode).clicks == 1


def test_concurrent_redirects(service):
    shortcode = service.create('https://example.com/a').shortcode
    threads_count, redirects_per_thread = 10, 30
    barrier = threading.Barrier(threads_count)

    def worker():
        barrier.wait()
        for _ in range(redirects_per_thread):
            service.redirect(shortcode, RequestContext(user_agent='load-test'))

    threads = [threading.Thread(target=worker) for _ in range(threads_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    stats = service.stats(shortcode)
    assert stats.clicks == threads_count * redirects_per_thread
    assert len(stats.click_history) == stats.clicks


# -------------------------------
# 3. Listing and deletion
# -------------------------------


def test_list_all(service, dao, clock):
    short_lived = service.create('https://example.com/a', validity=1).shortcode
    long_lived = service.create('https://example.com/b', validity=60).shortcode
    evicted = service.create('https://example.com/c', validity=0.5).shortcode

    clock.advance(minutes=1)
    dao.evict(clock(), grace_seconds=20)

    shortcodes = [short_url.shortcode for short_url in service.list_all()]
    assert shortcodes == [short_lived, long_lived]
    assert evicted not in shortcodes


def test_delete(service):
    shortcode = service.create('https://example.com/a', shortcode='promo1').shortcode
    service.delete(shortcode)

    with pytest.raises(ShortURLNotFoundError):
        service.stats(shortcode)
    assert service.create('https://example.com/b', shortcode='promo1').target == 'https://example.com/b'


def test_delete_unknown_shortcode(service):
    with pytest.raises(ShortURLNotFoundError):
        service.delete('nope1')


def test_dao_not_found_is_translated(service):
    with pytest.raises(ShortURLNotFoundError) as exc_info:
        service.stats('nope1')
    assert isinstance(exc_info.value.__cause__, dao_errors.ShortURLNotFoundError)
