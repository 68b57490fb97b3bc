from typing import cast

import pytest
from pytest import MonkeyPatch

from shortlinker.types import LambdaConfiguration
from shortlinker.dao.memory import ShortURLMemoryDAO


@pytest.fixture(autouse=True)
def _deployed_env(monkeypatch: MonkeyPatch) -> None:
    """Run handlers as if deployed, so unexpected errors become 500 responses."""
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)
    monkeypatch.delenv('APP_NAME', raising=False)


@pytest.fixture
def config() -> LambdaConfiguration:
    return cast(LambdaConfiguration, {'memory': {}, 'lifecycle': {'default_validity_minutes': 30}})


@pytest.fixture
def short_url_dao() -> ShortURLMemoryDAO:
    return ShortURLMemoryDAO()


@pytest.fixture
def request_context() -> dict:
    return {'domainName': 'testhost:1000', 'stage': 'test', 'identity': {'sourceIp': '203.0.113.7'}}
