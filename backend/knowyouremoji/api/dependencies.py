"""Request Dependencies: hand app.state collaborators to routes.

Invariants:
    - Collaborators are built once in the lifespan and stored on app.state
    - Routes receive them through Depends, so tests override them with
      app.dependency_overrides
"""

from fastapi import Request

from knowyouremoji.config import Settings, get_settings
from knowyouremoji.infrastructure.content_repository import ContentStore
from knowyouremoji.services.interpreter import InterpreterService


def get_content(request: Request) -> ContentStore:
    return request.app.state.content


def get_interpreter(request: Request) -> InterpreterService:
    return request.app.state.interpreter


def get_app_settings() -> Settings:
    return get_settings()
