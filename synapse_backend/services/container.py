"""
Service container - composition root owning the router and every service
"""

from __future__ import annotations

import logging

from .agent_service import AgentService
from .chat_service import ChatService, ChatTranscriptStore
from .context_builder import ContextBuilder
from .diff_generator import DiffGenerator
from .element_locator import ElementLocator
from .errors import ConfigurationError
from .inspector_session import InspectorSession
from .local_store import LocalStore
from .model_selection import ModelSelector
from .providers import AnthropicAdapter, GeminiAdapter, OpenAIAdapter, ProviderRouter
from .quick_edit import QuickEditService
from .settings_store import SettingsStore
from .workspace_service import WorkspaceService

logger = logging.getLogger(__name__)


def build_router() -> ProviderRouter:
    router = ProviderRouter()
    router.register(OpenAIAdapter())
    router.register(AnthropicAdapter())
    router.register(GeminiAdapter())
    return router


class AppServices:
    """Everything the HTTP layer needs, constructed once per application"""

    def __init__(self, store: LocalStore | None = None, router: ProviderRouter | None = None):
        self.store = store or LocalStore()
        self.router = router or build_router()
        self.settings = SettingsStore(self.store)
        self.transcript = ChatTranscriptStore(self.store)
        self.inspector = InspectorSession()
        self.workspace = WorkspaceService()

        self.context_builder = ContextBuilder()
        self.diff_generator = DiffGenerator()
        self.selector = ModelSelector(self.router, self.settings.load)

        self.quick_edit = QuickEditService(
            self.selector, self.context_builder, self.diff_generator, self.inspector
        )
        self.chat = ChatService(self.selector, self.context_builder)
        self.agent = AgentService(self.selector, self.workspace)
        self.locator = ElementLocator(self.selector)

        self.apply_settings()
        logger.info("Services initialized with providers: %s", ", ".join(self.router.ids()))

    def apply_settings(self) -> None:
        """Point the router default at the configured provider"""
        provider_id = self.settings.load().ai.default_provider
        try:
            self.router.set_default(provider_id)
        except ConfigurationError as e:
            logger.warning("Keeping default provider %s: %s", self.router.default_provider_id, e)
