"""Mock Anthropic Client: scripted model replies for interpreter and client tests.

Invariants:
    - MockModelClient sequences replies (one per complete call); an Exception
      entry is raised instead of returned
    - MockSDKClient mimics AsyncAnthropic.messages.create and .stream for
      ResilientAnthropicClient tests, with the same sequencing rule; a stream
      outcome is a list of text chunks, an Exception inside it is raised mid-stream
    - Every call is recorded in .calls

Design Decisions:
    - Flat mock classes (no inheritance): simple, explicit, easy to debug
    - api_status_error builds real anthropic exceptions over httpx responses,
      so classification is exercised against the SDK's own types
"""

import json

import httpx

ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"


# -- Mock Anthropic SDK objects ------------------------------------------------


class _Block:
    """Mock content block."""

    def __init__(self, **kwargs):
        for k, v in kwargs.items():
            setattr(self, k, v)


class _Usage:
    def __init__(self, input_tokens=100, output_tokens=50):
        self.input_tokens = input_tokens
        self.output_tokens = output_tokens


class _Message:
    """Mock Message returned by messages.create()."""

    def __init__(self, content, stop_reason="end_turn"):
        self.content = content
        self.stop_reason = stop_reason
        self.usage = _Usage()


def text_message(text):
    return _Message([_Block(type="text", text=text)])


class _MessagesAPI:
    def __init__(self, outcomes):
        self._outcomes = list(outcomes)
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if not self._outcomes:
            raise RuntimeError(
                f"MockSDKClient: no outcome for call {len(self.calls)}",
            )
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def stream(self, **kwargs):
        self.calls.append(kwargs)
        if not self._outcomes:
            raise RuntimeError(
                f"MockSDKClient: no outcome for call {len(self.calls)}",
            )
        return _MessageStream(self._outcomes.pop(0))


class _MessageStream:
    """Mock AsyncMessageStreamManager and the stream it opens."""

    def __init__(self, outcome):
        self._outcome = outcome

    async def __aenter__(self):
        if isinstance(self._outcome, BaseException):
            raise self._outcome
        return self

    async def __aexit__(self, *exc_info):
        return False

    @property
    def text_stream(self):
        return self._chunks()

    async def _chunks(self):
        for chunk in self._outcome:
            if isinstance(chunk, BaseException):
                raise chunk
            yield chunk

    async def get_final_message(self):
        return text_message("".join(c for c in self._outcome if isinstance(c, str)))


class MockSDKClient:
    """Stands in for anthropic.AsyncAnthropic."""

    def __init__(self, outcomes):
        self.messages = _MessagesAPI(outcomes)


def api_status_error(error_cls, status_code, headers=None, message="error"):
    """Real anthropic APIStatusError subclass over a fake httpx response."""
    request = httpx.Request("POST", ANTHROPIC_URL)
    response = httpx.Response(status_code, request=request, headers=headers or {})
    return error_cls(message, response=response, body=None)


def api_request():
    return httpx.Request("POST", ANTHROPIC_URL)


# -- Model client double -------------------------------------------------------


class MockModelClient:
    """Replaces ResilientAnthropicClient. Sequences pre-configured replies."""

    def __init__(self, replies):
        self._replies = list(replies)
        self.calls = []

    async def complete(self, system, prompt, context=None):
        self.calls.append({"system": system, "prompt": prompt, "context": context})
        if not self._replies:
            raise RuntimeError(
                f"MockModelClient: no reply at index {len(self.calls) - 1}",
            )
        reply = self._replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply

    async def stream(self, system, prompt, context=None):
        """A str reply streams whole; a list streams item by item."""
        self.calls.append({"system": system, "prompt": prompt, "context": context})
        if not self._replies:
            raise RuntimeError(
                f"MockModelClient: no reply at index {len(self.calls) - 1}",
            )
        reply = self._replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        for chunk in [reply] if isinstance(reply, str) else reply:
            if isinstance(chunk, BaseException):
                raise chunk
            yield chunk


# -- Builder helpers -----------------------------------------------------------


def reply_payload(**overrides):
    """A contract-valid model reply as a dict."""
    payload = {
        "emojis": [{"character": "💀", "meaning": "dying of laughter"}],
        "interpretation": "The sender finds this extremely funny.",
        "metrics": {
            "sarcasmProbability": 10,
            "passiveAggressionProbability": 5,
            "overallTone": "positive",
            "confidence": 90,
        },
        "redFlags": [],
    }
    payload.update(overrides)
    return payload


def reply_text(**overrides):
    return json.dumps(reply_payload(**overrides), ensure_ascii=False)
