"""Provider-neutral LLM data models"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    """Conversation turn speaker"""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single role-tagged conversation turn"""

    role: Role
    content: str
    image: str | None = None  # data URL or raw base64 PNG


class ModelConfig(BaseModel):
    """Per-request generation and authentication parameters"""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_id: str
    temperature: float | None = None
    max_tokens: int | None = None
    api_key: str | None = None
    base_url: str | None = None
    timeout_seconds: float | None = None  # None waits forever


class Usage(BaseModel):
    """Token accounting, zero when the backend omits it"""

    input_tokens: int = 0
    output_tokens: int = 0


class LLMResponse(BaseModel):
    """Normalized result of a non-streaming call"""

    content: str
    usage: Usage = Usage()


class StreamChunk(BaseModel):
    """One incremental piece of a streamed response"""

    content: str = ""
    is_complete: bool = False
