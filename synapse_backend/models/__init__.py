"""Models module - Pydantic data models"""

from .agent import AgentRequest, AgentResult, AgentStep, ToolName
from .chat import ChatRecord, ChatRequest, ChatResponse, CodeBlock, RecordType, StreamEvent
from .context import CodePatch, ContextItem, ContextItemType, EditorState, Range
from .edit import ApplyPatchRequest, ApplyPatchResponse, DiffHunk, QuickEditRequest, QuickEditResponse
from .inspector import (
    ElementClickedMessage,
    ElementClickedPayload,
    InspectorMessage,
    LocateMethod,
    LocateResult,
    SelectedElementContext,
    ToggleInspectorMessage,
)
from .llm import LLMResponse, Message, ModelConfig, Role, StreamChunk, Usage
from .settings import Settings, SettingsUpdate

__all__ = [
    # LLM models
    "LLMResponse",
    "Message",
    "ModelConfig",
    "Role",
    "StreamChunk",
    "Usage",
    # Editor / patch models
    "CodePatch",
    "ContextItem",
    "ContextItemType",
    "EditorState",
    "Range",
    "ApplyPatchRequest",
    "ApplyPatchResponse",
    "DiffHunk",
    "QuickEditRequest",
    "QuickEditResponse",
    # Inspector models
    "ElementClickedMessage",
    "ElementClickedPayload",
    "InspectorMessage",
    "LocateMethod",
    "LocateResult",
    "SelectedElementContext",
    "ToggleInspectorMessage",
    # Chat models
    "ChatRecord",
    "ChatRequest",
    "ChatResponse",
    "CodeBlock",
    "RecordType",
    "StreamEvent",
    # Agent models
    "AgentRequest",
    "AgentResult",
    "AgentStep",
    "ToolName",
    # Settings
    "Settings",
    "SettingsUpdate",
]
