"""Agent mode API endpoints"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..models.agent import AgentRequest, AgentResult
from ..services.container import AppServices
from .deps import get_services

router = APIRouter()


@router.post("/run", response_model=AgentResult)
async def run_task(request: AgentRequest, services: AppServices = Depends(get_services)) -> AgentResult:
    """Run a bounded tool-calling task against the workspace"""
    return await services.agent.run_task(
        request.task,
        root=request.root,
        model_id=request.model_id,
        provider_id=request.provider_id,
    )
