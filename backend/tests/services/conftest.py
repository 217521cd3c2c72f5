"""Service test fixtures: bundled content, in-memory cache and settings.

Invariants:
    - No fixture reaches the network; the model is always a MockModelClient
    - settings ignores any .env file on the developer machine
"""

import pytest

from knowyouremoji.config import DEFAULT_DATA_DIR, Settings
from knowyouremoji.infrastructure.content_repository import ContentStore
from knowyouremoji.infrastructure.redis_cache import RedisCache

from tests.services.fake_stores import FakeRedis


@pytest.fixture
def settings():
    return Settings(_env_file=None, anthropic_api_key="sk-ant-test", redis_url=None)


@pytest.fixture
def content():
    return ContentStore(DEFAULT_DATA_DIR / "emojis", DEFAULT_DATA_DIR / "combos")


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cache(fake_redis):
    return RedisCache(client=fake_redis)
