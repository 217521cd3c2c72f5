"""KnowYourEmoji API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map KnowYourEmojiError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - ContentStore, RedisCache and InterpreterService built once in the lifespan
      and stored on app.state

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - The Anthropic client is built per request through a factory, so a missing
      key surfaces as CONFIG_ERROR on /interpret instead of a failed startup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from knowyouremoji.api.error_handlers import register_error_handlers
from knowyouremoji.api.routes import combos, emojis, health, interpret
from knowyouremoji.config import Settings, get_settings
from knowyouremoji.infrastructure.anthropic_client import get_client
from knowyouremoji.infrastructure.content_repository import ContentStore
from knowyouremoji.infrastructure.observability import setup_logging
from knowyouremoji.infrastructure.redis_cache import RedisCache
from knowyouremoji.services.interpreter import InterpreterService

logger = logging.getLogger(__name__)


def build_interpreter(
    settings: Settings, content: ContentStore, cache: RedisCache,
) -> InterpreterService:
    return InterpreterService(
        content=content,
        cache=cache,
        client_factory=lambda: get_client(settings),
        settings=settings,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    content = ContentStore(settings.emojis_dir, settings.combos_dir)
    content.warm()
    cache = RedisCache(settings.redis_url)
    app.state.content = content
    app.state.cache = cache
    app.state.interpreter = build_interpreter(settings, content, cache)

    logger.info(
        f"KnowYourEmoji API started: {content.emojis.count()} emojis, "
        f"{content.combos.count()} combos, cache "
        f"{'enabled' if cache.is_available() else 'disabled'}",
    )
    if not settings.interpreter_configured:
        logger.warning("Interpreter not configured; /api/v1/interpret will return 503")
    yield
    await cache.close()
    logger.info("KnowYourEmoji API shutting down")


app = FastAPI(
    title="KnowYourEmoji API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(emojis.router)
app.include_router(combos.router)
app.include_router(interpret.router)

register_error_handlers(app)
