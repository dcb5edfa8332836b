"""Configuration API endpoints"""

from __future__ import annotations

import asyncio

import aiohttp
from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict

from ..models.llm import Message, Role
from ..models.settings import SettingsUpdate
from ..services.container import AppServices
from ..services.errors import SynapseError, UnknownProviderError
from ..services.model_selection import Operation
from .deps import get_services

router = APIRouter()


class ValidateRequest(BaseModel):
    """Which provider/model to test; defaults come from settings"""

    model_config = ConfigDict(protected_namespaces=())

    provider_id: str | None = None
    model_id: str | None = None


class ValidateResponse(BaseModel):
    """Validation response"""

    valid: bool
    message: str
    provider: str


def _provider_list(services: AppServices) -> list[dict]:
    return [
        {"id": entry.id, "name": entry.name, "default": entry.id == services.router.default_provider_id}
        for entry in services.router.entries()
    ]


@router.get("")
async def get_config(services: AppServices = Depends(get_services)) -> dict:
    """Get current settings with API keys masked"""
    return {
        "settings": services.settings.masked().model_dump(mode="json"),
        "providers": _provider_list(services),
    }


@router.put("")
async def update_config(request: SettingsUpdate, services: AppServices = Depends(get_services)) -> dict:
    """Update settings; nested sections merge with what is stored"""
    default_provider = (request.ai or {}).get("default_provider")
    if isinstance(default_provider, str) and services.router.get(default_provider) is None:
        raise UnknownProviderError(default_provider)

    settings = services.settings.update(request)
    services.apply_settings()
    return {
        "status": "success",
        "message": "Configuration updated",
        "settings": services.settings.masked(settings).model_dump(mode="json"),
    }


@router.get("/providers")
async def list_providers(services: AppServices = Depends(get_services)) -> list[dict]:
    return _provider_list(services)


@router.post("/validate", response_model=ValidateResponse)
async def validate_config(
    request: ValidateRequest | None = None,
    services: AppServices = Depends(get_services),
) -> ValidateResponse:
    """Validate a provider by sending it a tiny prompt"""
    request = request or ValidateRequest()
    adapter, config = services.selector.select(Operation.CHAT, request.model_id, request.provider_id)

    try:
        response = await adapter.generate(
            [Message(role=Role.USER, content="Say 'OK' if you can hear me.")], config
        )
    except (SynapseError, aiohttp.ClientError, asyncio.TimeoutError) as e:
        return ValidateResponse(valid=False, message=f"Connection failed: {e}", provider=adapter.id)

    if response.content:
        return ValidateResponse(valid=True, message=f"Successfully connected to {adapter.name}", provider=adapter.id)
    return ValidateResponse(valid=False, message="Received empty response from LLM", provider=adapter.id)
