"""Services module - Business logic layer"""

from .agent_service import AgentService
from .chat_service import ChatService, ChatTranscriptStore
from .container import AppServices
from .context_builder import ContextBuilder
from .diff_generator import DiffGenerator
from .element_locator import ElementLocator
from .quick_edit import QuickEditService
from .settings_store import SettingsStore
from .workspace_service import WorkspaceService

__all__ = [
    "AgentService",
    "AppServices",
    "ChatService",
    "ChatTranscriptStore",
    "ContextBuilder",
    "DiffGenerator",
    "ElementLocator",
    "QuickEditService",
    "SettingsStore",
    "WorkspaceService",
]
