"""
Chat Service - Multi-turn conversation with optional streaming
"""

from __future__ import annotations

import logging
import re
import uuid
from typing import AsyncIterator

from ..models.chat import ChatRecord, CodeBlock, RecordType
from ..models.inspector import SelectedElementContext
from ..models.llm import LLMResponse, Message, Role, StreamChunk
from .context_builder import ContextBuilder
from .local_store import LocalStore
from .model_selection import ModelSelector, Operation
from .prompts import CHAT_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

TRANSCRIPT_KEY = "synapse.chat.v1"


def extract_code_blocks(content: str) -> list[CodeBlock]:
    """Extract code blocks from markdown response"""
    pattern = r"```(\w+)?\n(.*?)```"
    return [
        CodeBlock(language=lang or "text", code=code.strip())
        for lang, code in re.findall(pattern, content, re.DOTALL)
    ]


class ChatTranscriptStore:
    """Ordered chat records persisted in the local store"""

    def __init__(self, store: LocalStore):
        self.store = store

    def load(self) -> list[ChatRecord]:
        raw = self.store.get(TRANSCRIPT_KEY, [])
        records = []
        for item in raw if isinstance(raw, list) else []:
            try:
                records.append(ChatRecord.model_validate(item))
            except ValueError as e:
                logger.warning("Dropping unreadable chat record: %s", e)
        return records

    def append(self, *records: ChatRecord) -> None:
        current = self.load()
        current.extend(records)
        self.store.set(TRANSCRIPT_KEY, [r.model_dump(mode="json") for r in current])

    def clear(self) -> None:
        self.store.delete(TRANSCRIPT_KEY)

    def history(self) -> list[Message]:
        """Transcript as provider messages, error records excluded"""
        return [r.to_message() for r in self.load() if r.type != RecordType.ERROR]


def new_record(role: Role, content: str, image: str | None = None) -> ChatRecord:
    record_type = RecordType.CODE if role == Role.ASSISTANT and extract_code_blocks(content) else RecordType.TEXT
    return ChatRecord(id=str(uuid.uuid4()), role=role, content=content, type=record_type, image=image)


class ChatService:
    """Build conversation requests and send them through the router"""

    def __init__(self, selector: ModelSelector, context_builder: ContextBuilder | None = None):
        self.selector = selector
        self.context_builder = context_builder or ContextBuilder()

    def build_messages(
        self,
        history: list[Message],
        user_message: str,
        element: SelectedElementContext | None = None,
        image: str | None = None,
    ) -> list[Message]:
        messages = list(history)
        if not any(m.role == Role.SYSTEM for m in messages):
            messages.insert(0, Message(role=Role.SYSTEM, content=CHAT_SYSTEM_PROMPT))

        content = user_message
        if element is not None:
            element_text = self.context_builder.format_element_context(element)
            content = f"{user_message}\n\nSELECTED ELEMENT:\n{element_text}"
        messages.append(Message(role=Role.USER, content=content, image=image))
        return messages

    async def chat(
        self,
        history: list[Message],
        user_message: str,
        model_id: str | None = None,
        provider_id: str | None = None,
        element: SelectedElementContext | None = None,
        image: str | None = None,
    ) -> tuple[LLMResponse, str]:
        """Return the response and the id of the provider that produced it"""
        adapter, config = self.selector.select(Operation.CHAT, model_id, provider_id)
        messages = self.build_messages(history, user_message, element, image)
        response = await adapter.generate(messages, config)
        logger.info("Chat reply from %s/%s (%d chars)", adapter.id, config.model_id, len(response.content))
        return response, adapter.id

    async def stream_chat(
        self,
        history: list[Message],
        user_message: str,
        model_id: str | None = None,
        provider_id: str | None = None,
        element: SelectedElementContext | None = None,
        image: str | None = None,
    ) -> AsyncIterator[StreamChunk]:
        adapter, config = self.selector.select(Operation.CHAT, model_id, provider_id)
        messages = self.build_messages(history, user_message, element, image)
        async for chunk in adapter.stream(messages, config):
            yield chunk
