"""Provider registry and request routing"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ...models.llm import ModelConfig
from ..errors import UnknownProviderError
from .base import ProviderAdapter

logger = logging.getLogger(__name__)

# Prefix inference is best-effort; an explicit provider_id always wins
MODEL_PREFIXES: tuple[tuple[str, str], ...] = (
    ("claude", "anthropic"),
    ("gpt", "openai"),
    ("o1", "openai"),
    ("o3", "openai"),
    ("o4", "openai"),
    ("gemini", "gemini"),
)


@dataclass(frozen=True)
class ProviderEntry:
    id: str
    name: str
    adapter: ProviderAdapter


class ProviderRouter:
    """Maps provider ids to adapters and picks one per request"""

    def __init__(self, default_provider_id: str = "openai"):
        self._providers: dict[str, ProviderAdapter] = {}
        self._default_provider_id = default_provider_id

    @property
    def default_provider_id(self) -> str:
        return self._default_provider_id

    def register(self, adapter: ProviderAdapter) -> None:
        self._providers[adapter.id] = adapter

    def get(self, provider_id: str) -> ProviderAdapter | None:
        return self._providers.get(provider_id)

    def ids(self) -> list[str]:
        return list(self._providers)

    def entries(self) -> list[ProviderEntry]:
        return [ProviderEntry(a.id, a.name, a) for a in self._providers.values()]

    def set_default(self, provider_id: str) -> None:
        if provider_id not in self._providers:
            raise UnknownProviderError(provider_id)
        self._default_provider_id = provider_id

    def infer_provider_id(self, model_id: str | None) -> str | None:
        """Provider id suggested by the model naming convention, if registered"""
        if not model_id:
            return None
        lowered = model_id.lower()
        for prefix, provider_id in MODEL_PREFIXES:
            if lowered.startswith(prefix) and provider_id in self._providers:
                return provider_id
        return None

    def resolve(
        self,
        config: ModelConfig | None = None,
        provider_id: str | None = None,
    ) -> ProviderAdapter:
        """Pick an adapter: explicit id, then model-name prefix, then the default"""
        if provider_id:
            adapter = self._providers.get(provider_id)
            if adapter is None:
                raise UnknownProviderError(provider_id)
            return adapter

        inferred = self.infer_provider_id(config.model_id if config else None)
        if inferred:
            return self._providers[inferred]

        adapter = self._providers.get(self._default_provider_id)
        if adapter is None:
            raise UnknownProviderError(self._default_provider_id)
        logger.debug("Routing %s to default provider %s", config.model_id if config else None, adapter.id)
        return adapter
