"""Chat mode data models"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .llm import Message, Role, Usage


class ChatRequest(BaseModel):
    """Request for chat message"""

    model_config = ConfigDict(protected_namespaces=())

    message: str
    history: list[Message] | None = None  # None continues the persisted transcript
    model_id: str | None = None
    provider_id: str | None = None
    image: str | None = None
    persist: bool = True


class CodeBlock(BaseModel):
    """Extracted code block from response"""

    language: str
    code: str


class ChatResponse(BaseModel):
    """Response for chat message"""

    message_id: str
    content: str
    code_blocks: list[CodeBlock] = []
    usage: Usage = Usage()
    metadata: dict = {}


class StreamEvent(BaseModel):
    """SSE stream event"""

    type: str  # "content", "code_block", "done", "error"
    chunk: str | None = None
    code_block: CodeBlock | None = None
    metadata: dict | None = None
    done: bool = False
    error: str | None = None


class RecordType(str, Enum):
    TEXT = "text"
    CODE = "code"
    ERROR = "error"


class ChatRecord(BaseModel):
    """One persisted transcript entry"""

    id: str
    role: Role
    content: str
    type: RecordType = RecordType.TEXT
    image: str | None = None

    def to_message(self) -> Message:
        return Message(role=self.role, content=self.content, image=self.image)


class TranscriptResponse(BaseModel):
    records: list[ChatRecord] = Field(default_factory=list)
