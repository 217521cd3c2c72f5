"""API test fixtures: FastAPI app with collaborators swapped for test doubles.

Invariants:
    - The lifespan never runs under ASGITransport; every app.state dependency
      is supplied through app.dependency_overrides
    - The model is scripted per test through ModelScript; nothing reaches
      Anthropic or Redis

Design Decisions:
    - raise_app_exceptions=False so the catch-all handler's 500 reaches the test
"""

import pytest
from httpx import ASGITransport, AsyncClient

from knowyouremoji.api.dependencies import get_app_settings, get_content, get_interpreter
from knowyouremoji.config import DEFAULT_DATA_DIR, Settings
from knowyouremoji.core.errors import ConfigurationError
from knowyouremoji.infrastructure.content_repository import ContentStore
from knowyouremoji.infrastructure.redis_cache import RedisCache
from knowyouremoji.main import app
from knowyouremoji.services.interpreter import InterpreterService

from tests.services.mock_anthropic import MockModelClient


class ModelScript:
    """Client factory whose replies (or configuration failure) tests set."""

    def __init__(self):
        self.client = MockModelClient([])
        self.missing_setting: str | None = None

    def replies(self, *replies) -> MockModelClient:
        self.client = MockModelClient(replies)
        return self.client

    def __call__(self):
        if self.missing_setting:
            raise ConfigurationError(self.missing_setting)
        return self.client


@pytest.fixture
def api_settings():
    return Settings(_env_file=None, anthropic_api_key="sk-ant-test", redis_url=None)


@pytest.fixture
def api_content():
    return ContentStore(DEFAULT_DATA_DIR / "emojis", DEFAULT_DATA_DIR / "combos")


@pytest.fixture
def model_script():
    return ModelScript()


@pytest.fixture
async def client(api_settings, api_content, model_script):
    interpreter = InterpreterService(
        content=api_content,
        cache=RedisCache(None),
        client_factory=model_script,
        settings=api_settings,
    )
    app.dependency_overrides[get_content] = lambda: api_content
    app.dependency_overrides[get_interpreter] = lambda: interpreter
    app.dependency_overrides[get_app_settings] = lambda: api_settings

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
