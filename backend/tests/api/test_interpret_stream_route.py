"""Interpret stream route: errors before the first byte, raw text after it.

Tests:
    - 200 text/plain body is the concatenated model output, with no-buffering headers
    - 400 envelope for invalid bodies; the model is never called
    - 503 for configuration and upstream failures, 429 with Retry-After
    - A failure after the first chunk truncates the body instead of changing status
"""

import pytest

from knowyouremoji.core.errors import SERVICE_UNAVAILABLE_MESSAGE, LLMAPIError

from tests.services.mock_anthropic import reply_text

URL = "/api/v1/interpret/stream"


def _body(**overrides):
    body = {"message": "sure, great idea 🙄🙄", "platform": "SLACK", "context": "COWORKER"}
    body.update(overrides)
    return body


async def test_streams_model_text(client, model_script):
    text = reply_text()
    model = model_script.replies([text[:20], text[20:]])
    response = await client.post(URL, json=_body())

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.headers["cache-control"] == "no-cache, no-transform"
    assert response.headers["x-accel-buffering"] == "no"
    assert response.text == text
    assert "**Platform:** SLACK" in model.calls[0]["prompt"]


@pytest.mark.parametrize("overrides, field", [
    ({"platform": "MYSPACE"}, "platform"),
    ({"context": "BOSS"}, "context"),
    ({"message": "hi 🙄"}, "message"),
])
async def test_invalid_body_is_400_before_streaming(client, model_script, overrides, field):
    model = model_script.replies(["never"])
    response = await client.post(URL, json=_body(**overrides))

    assert response.status_code == 400
    assert list(response.json()["error"]["field_errors"]) == [field]
    assert model.calls == []


async def test_malformed_json_is_400(client):
    response = await client.post(
        URL, content=b"not json", headers={"content-type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Invalid JSON in request body"


async def test_missing_key_is_503(client, model_script):
    model_script.missing_setting = "ANTHROPIC_API_KEY"
    response = await client.post(URL, json=_body())

    assert response.status_code == 503
    error = response.json()["error"]
    assert error["code"] == "CONFIG_ERROR"
    assert error["message"] == SERVICE_UNAVAILABLE_MESSAGE


async def test_rate_limit_is_429_with_retry_after(client, model_script):
    model_script.replies(LLMAPIError("slow", "rate_limit", retry_after_ms=2000, status_code=429))
    response = await client.post(URL, json=_body())

    assert response.status_code == 429
    assert response.headers["retry-after"] == "2"
    assert response.json()["error"]["code"] == "RATE_LIMITED"


async def test_upstream_failure_is_503(client, model_script):
    model_script.replies(LLMAPIError("secret upstream detail", "server_error", status_code=500))
    response = await client.post(URL, json=_body())

    assert response.status_code == 503
    assert "secret" not in response.text


async def test_failure_after_first_chunk_truncates_body(client, model_script):
    model_script.replies(["{\"emojis\": ", LLMAPIError("dropped", "connection_error")])
    response = await client.post(URL, json=_body())

    assert response.status_code == 200
    assert response.text == "{\"emojis\": "
