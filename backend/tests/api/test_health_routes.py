"""Health probes: liveness and content-driven readiness."""

from knowyouremoji.api.dependencies import get_content
from knowyouremoji.infrastructure.content_repository import ContentStore
from knowyouremoji.main import app


async def test_liveness(client):
    response = await client.get("/api/v1/health/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_ready_with_bundled_content(client):
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ready"
    assert body["checks"]["emojis"] == 7
    assert body["checks"]["combos"] == 5
    assert body["checks"]["interpreter_configured"] is True


async def test_not_ready_without_emoji(client, tmp_path):
    empty = ContentStore(tmp_path / "emojis", tmp_path / "combos")
    app.dependency_overrides[get_content] = lambda: empty
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
    assert response.json()["reason"] == "content_unavailable"
