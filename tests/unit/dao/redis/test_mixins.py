import pytest
import redis

from shortlinker.dao.exceptions import DataStoreError
from shortlinker.dao.redis.mixins import RedisClientMixin


class TestRedisClientMixin:
    redis_client: redis.Redis
    unhealthy_redis_client: redis.Redis

    @pytest.fixture
    def unhealthy_redis_client(self, redis_client: redis.Redis) -> redis.Redis:
        redis_client.ping.side_effect = redis.exceptions.ConnectionError('Connection error')
        return redis_client

    def test_healthcheck_passes_with_healthy_redis(self, redis_client: redis.Redis):
        mixin = RedisClientMixin(redis_client=redis_client, prefix='testapp:test')
        redis_client.ping.assert_called_once()  # initialization performs a healthcheck
        assert mixin.keys.prefix == 'testapp:test'

    def test_healthcheck_fails_with_unhealthy_redis(self, unhealthy_redis_client: redis.Redis):
        with pytest.raises(DataStoreError, match="Can't connect to Redis at redis.test:6379/0."):
            RedisClientMixin(redis_client=unhealthy_redis_client, prefix='testapp:test')

    def test_healthcheck_after_connection_loss(self, redis_client: redis.Redis):
        mixin = RedisClientMixin(redis_client=redis_client)
        redis_client.connection_pool.connection_kwargs = {'host': 'redis.test', 'port': 6380, 'db': 2}
        redis_client.ping.side_effect = redis.exceptions.ConnectionError('Connection error')

        with pytest.raises(DataStoreError, match="Can't connect to Redis at redis.test:6380/2.") as exc_info:
            mixin._healthcheck()
        assert isinstance(exc_info.value.__cause__, redis.exceptions.ConnectionError)

    def test_client_is_built_from_connection_parameters(self, monkeypatch, redis_client: redis.Redis):
        captured = {}

        def fake_redis(**kwargs):
            captured.update(kwargs)
            return redis_client

        monkeypatch.setattr(redis, 'Redis', fake_redis)
        mixin = RedisClientMixin(redis_host='redis.test', redis_port='6380', redis_db='2', redis_password='secret')

        assert mixin.redis is redis_client
        assert captured == {
            'host': 'redis.test',
            'port': 6380,
            'db': 2,
            'decode_responses': True,
            'username': None,
            'password': 'secret',
        }
