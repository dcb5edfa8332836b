"""
Model selection - pick the adapter and build the ModelConfig for an operation
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Callable

from ..models.llm import ModelConfig
from ..models.settings import Settings
from .providers import ProviderAdapter, ProviderRouter

API_KEY_ENV = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "gemini": "GEMINI_API_KEY",
}


class Operation(str, Enum):
    QUICK_EDIT = "quick_edit"
    CHAT = "chat"
    AGENT = "agent"
    LOCATE = "locate"


class ModelSelector:
    """Combine request overrides, user settings and the router into one choice"""

    def __init__(self, router: ProviderRouter, settings: Callable[[], Settings]):
        self.router = router
        self._settings = settings

    def model_for(self, operation: Operation, settings: Settings) -> str:
        ai = settings.ai
        per_operation = {
            Operation.QUICK_EDIT: ai.quick_edit_model,
            Operation.CHAT: ai.chat_model,
            Operation.AGENT: ai.agent_model,
        }.get(operation)
        return per_operation or ai.default_model

    def select(
        self,
        operation: Operation,
        model_id: str | None = None,
        provider_id: str | None = None,
    ) -> tuple[ProviderAdapter, ModelConfig]:
        settings = self._settings()
        base = ModelConfig(
            model_id=model_id or self.model_for(operation, settings),
            temperature=settings.ai.temperature,
            max_tokens=settings.ai.max_tokens,
            timeout_seconds=settings.ai.request_timeout,
        )
        adapter = self.router.resolve(base, provider_id)

        creds = settings.providers.get(adapter.id)
        api_key = (creds.api_key if creds else "") or os.environ.get(API_KEY_ENV.get(adapter.id, ""), "")
        config = base.model_copy(
            update={
                "api_key": api_key or None,
                "base_url": creds.base_url if creds else None,
            }
        )
        return adapter, config
