"""Root conftest: shared test configuration.

Invariants:
    - Tests never reach a real Anthropic key or a real Redis server
"""

import os

os.environ.setdefault("ANTHROPIC_API_KEY", "sk-ant-test-fake-key")
os.environ["REDIS_URL"] = ""
os.environ.setdefault("LOG_FORMAT", "text")
