"""Interpret Route: POST /api/v1/interpret and its streaming variant.

Invariants:
    - Body validation happens in FastAPI (InterpretRequest) before the handler
      runs; failures reach the global RequestValidationError handler
    - The interpretation runs as a task that is cancelled as soon as the client
      disconnects; nothing is written back to a closed connection
    - ?include_tones=true adds toneSuggestions computed from the metrics
    - /stream validates and opens the model stream before the response starts,
      so 400/429/503 still arrive as JSON; after that the body is raw model text
"""

import asyncio
import logging
from collections.abc import Awaitable

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import StreamingResponse

from knowyouremoji.api.dependencies import get_interpreter
from knowyouremoji.core.errors import LLMAPIError
from knowyouremoji.schemas.interpret import InterpretationResult, InterpretRequest
from knowyouremoji.services.interpreter import InterpreterService
from knowyouremoji.services.request_normalizer import normalize_request

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/interpret", tags=["interpret"])

DISCONNECT_POLL_SECONDS = 0.25
# nginx convention for "client closed request"
CLIENT_CLOSED_REQUEST = 499

# Keep proxies and browsers from batching streamed chunks
_STREAM_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}


class ClientDisconnected(Exception):
    """The caller went away while the interpretation was running."""


async def run_until_disconnect(
    request: Request,
    work: Awaitable,
    poll_interval: float = DISCONNECT_POLL_SECONDS,
):
    """Await work, cancelling it if the client disconnects first."""
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=poll_interval)
            if done:
                return task.result()
            if await request.is_disconnected():
                task.cancel()
                logger.info(
                    "Client disconnected, interpretation cancelled",
                    extra={"path": request.url.path},
                )
                raise ClientDisconnected()
    finally:
        if not task.done():
            task.cancel()


@router.post(
    "", response_model=InterpretationResult, response_model_exclude_none=True,
)
async def interpret(
    payload: InterpretRequest,
    request: Request,
    include_tones: bool = False,
    service: InterpreterService = Depends(get_interpreter),
):
    normalized = normalize_request(payload)
    try:
        result = await run_until_disconnect(
            request, service.interpret_with_cache(normalized),
        )
    except ClientDisconnected:
        return Response(status_code=CLIENT_CLOSED_REQUEST)

    if include_tones:
        result = service.with_tone_suggestions(result)
    return result


@router.post("/stream")
async def interpret_stream(
    payload: InterpretRequest,
    request: Request,
    service: InterpreterService = Depends(get_interpreter),
):
    """Stream the model's reply text as it is generated."""
    normalized = normalize_request(payload)
    try:
        chunks = await run_until_disconnect(request, service.open_stream(normalized))
    except ClientDisconnected:
        return Response(status_code=CLIENT_CLOSED_REQUEST)

    async def text_generator():
        try:
            async for chunk in chunks:
                yield chunk
        except asyncio.CancelledError:
            logger.info(
                "Client disconnected from interpretation stream",
                extra={"path": request.url.path},
            )
            return
        except LLMAPIError as e:
            # headers are already sent; the truncated body is all the caller gets
            logger.error(
                f"Interpretation stream ended early: {e.message}",
                extra={"error_code": e.code, "path": request.url.path},
            )

    return StreamingResponse(
        text_generator(),
        media_type="text/plain; charset=utf-8",
        headers=_STREAM_HEADERS,
    )
