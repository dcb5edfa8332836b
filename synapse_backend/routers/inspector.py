"""Preview inspector API endpoints"""

from __future__ import annotations

from importlib import resources

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from ..models.inspector import (
    ElementClickedMessage,
    InspectorEvent,
    InspectorState,
    SelectedElementContext,
)
from ..services.container import AppServices
from .deps import get_services

router = APIRouter()


@router.get("/script")
async def inspector_script() -> Response:
    """Script the host injects into the previewed page"""
    script = resources.files("synapse_backend").joinpath("static/inspector.js").read_text(encoding="utf-8")
    return Response(content=script, media_type="application/javascript")


@router.get("/state", response_model=InspectorState)
async def inspector_state(services: AppServices = Depends(get_services)) -> InspectorState:
    return InspectorState(active=services.inspector.active, selected=services.inspector.selected)


@router.post("/message", response_model=InspectorState)
async def inspector_message(event: InspectorEvent, services: AppServices = Depends(get_services)) -> InspectorState:
    """Handle TOGGLE_INSPECTOR and ELEMENT_CLICKED messages from the preview"""
    session = services.inspector
    message = event.message

    if not isinstance(message, ElementClickedMessage):
        session.toggle(message.active)
        return InspectorState(active=session.active, selected=session.selected)

    payload = message.payload
    # Keep the click even if the AI fallback below fails
    session.select(SelectedElementContext(tag=payload.tag, selector=payload.selector, snippet=payload.snippet))

    result = await services.locator.locate(
        event.source,
        payload,
        model_id=event.model_id,
        provider_id=event.provider_id,
        use_ai=event.use_ai,
    )
    session.select(result.element)
    return InspectorState(active=session.active, selected=session.selected, result=result)


@router.delete("/selection", response_model=InspectorState)
async def dismiss_selection(services: AppServices = Depends(get_services)) -> InspectorState:
    services.inspector.dismiss()
    return InspectorState(active=services.inspector.active)
