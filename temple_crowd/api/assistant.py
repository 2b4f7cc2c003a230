"""REST endpoint for the site assistant.

Path: POST /api/assistant

Returns ``{"answer": ...}``, or a ``text/event-stream`` of
``data: {"delta": ...}`` frames terminated by ``data: [DONE]`` when the
request sets ``stream``.
"""

from __future__ import annotations

import json
from typing import AsyncIterator

from fastapi import APIRouter
from fastapi.responses import JSONResponse, StreamingResponse

from temple_crowd.assistant.service import AssistantError, AssistantService
from temple_crowd.models.assistant import AssistantReply, AssistantRequest

FAILURE_MESSAGE = "Failed to get a response from the assistant."


def _sse(payload: dict) -> str:
    return f"data: {json.dumps(payload)}\n\n"


def create_assistant_router(service: AssistantService) -> APIRouter:
    """Factory that wires the assistant endpoint to an AssistantService."""

    router = APIRouter(prefix="/api", tags=["assistant"])

    @router.post("/assistant")
    async def ask(body: AssistantRequest):
        if not body.question.strip():
            return JSONResponse(status_code=400, content={"error": "Question is required"})

        if body.stream:
            return StreamingResponse(_event_stream(service, body), media_type="text/event-stream")

        try:
            answer = await service.reply(body)
        except AssistantError:
            return JSONResponse(status_code=500, content={"error": FAILURE_MESSAGE})
        return AssistantReply(answer=answer)

    return router


async def _event_stream(service: AssistantService, body: AssistantRequest) -> AsyncIterator[str]:
    try:
        async for delta in service.stream(body):
            yield _sse({"delta": delta})
    except AssistantError:
        # Headers are already sent; report the failure in-band
        yield _sse({"error": FAILURE_MESSAGE})
    yield "data: [DONE]\n\n"
