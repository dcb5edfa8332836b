"""Chat mode API endpoints"""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends
from sse_starlette.sse import EventSourceResponse

from ..models.chat import ChatRequest, ChatResponse, StreamEvent, TranscriptResponse
from ..models.llm import Role
from ..services.chat_service import extract_code_blocks, new_record
from ..services.container import AppServices
from .deps import get_services

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/message", response_model=ChatResponse)
async def chat_message(request: ChatRequest, services: AppServices = Depends(get_services)) -> ChatResponse:
    """Send a chat message and get a response (non-streaming)"""
    history = request.history if request.history is not None else services.transcript.history()
    element = services.inspector.selected

    response, provider = await services.chat.chat(
        history,
        request.message,
        model_id=request.model_id,
        provider_id=request.provider_id,
        element=element,
        image=request.image,
    )
    services.inspector.consumed(element)

    if request.persist:
        services.transcript.append(
            new_record(Role.USER, request.message, request.image),
            new_record(Role.ASSISTANT, response.content),
        )

    return ChatResponse(
        message_id=str(uuid.uuid4()),
        content=response.content,
        code_blocks=extract_code_blocks(response.content),
        usage=response.usage,
        metadata={"provider": provider},
    )


@router.post("/stream")
async def chat_stream(request: ChatRequest, services: AppServices = Depends(get_services)):
    """Send a chat message and get a streaming response (SSE)"""
    history = request.history if request.history is not None else services.transcript.history()
    element = services.inspector.selected

    async def event_generator():
        full_content = ""

        try:
            async for chunk in services.chat.stream_chat(
                history,
                request.message,
                model_id=request.model_id,
                provider_id=request.provider_id,
                element=element,
                image=request.image,
            ):
                if chunk.is_complete:
                    break
                full_content += chunk.content
                event = StreamEvent(type="content", chunk=chunk.content)
                yield {"event": "message", "data": event.model_dump_json()}

            for block in extract_code_blocks(full_content):
                event = StreamEvent(type="code_block", code_block=block)
                yield {"event": "message", "data": event.model_dump_json()}

            event = StreamEvent(type="done", done=True, metadata={"length": len(full_content)})
            yield {"event": "message", "data": event.model_dump_json()}

            services.inspector.consumed(element)
            if request.persist:
                services.transcript.append(
                    new_record(Role.USER, request.message, request.image),
                    new_record(Role.ASSISTANT, full_content),
                )

        except Exception as e:
            # Errors after the response has started travel as an event
            logger.error("Chat stream failed: %s", e)
            event = StreamEvent(type="error", error=str(e))
            yield {"event": "message", "data": event.model_dump_json()}

    return EventSourceResponse(event_generator())


@router.get("/history", response_model=TranscriptResponse)
async def chat_history(services: AppServices = Depends(get_services)) -> TranscriptResponse:
    return TranscriptResponse(records=services.transcript.load())


@router.delete("/history")
async def clear_history(services: AppServices = Depends(get_services)) -> dict:
    services.transcript.clear()
    return {"status": "success", "message": "Chat history cleared"}
