"""Health & Readiness Probes: liveness and readiness endpoints.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 when no emoji content is loaded; the
      interpreter flag is reported but does not fail readiness
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from knowyouremoji.api.dependencies import get_app_settings, get_content
from knowyouremoji.config import Settings
from knowyouremoji.infrastructure.content_repository import ContentStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "knowyouremoji-api"
SERVICE_VERSION = "1.0.0"


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
    }


@router.get("/ready")
async def readiness_check(
    content: ContentStore = Depends(get_content),
    settings: Settings = Depends(get_app_settings),
):
    """Readiness probe: content loaded + interpreter configured flags."""
    emoji_count = content.emojis.count()
    checks = {
        "emojis": emoji_count,
        "combos": content.combos.count(),
        "interpreter_configured": settings.interpreter_configured,
    }
    if emoji_count == 0:
        logger.warning("Readiness failed: no emoji content loaded")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "content_unavailable", "checks": checks},
        )
    return {"status": "ready", "checks": checks}
