"""OpenAI chat-completions adapter"""

from __future__ import annotations

from typing import Any, AsyncIterator

from ...models.llm import LLMResponse, Message, ModelConfig, StreamChunk, Usage
from ..errors import ProtocolError
from .base import ProviderAdapter, dig, sse_field, to_data_url

DONE_SENTINEL = "[DONE]"


class OpenAIAdapter(ProviderAdapter):
    """Bearer-token ``/chat/completions`` backend; messages pass through as-is"""

    id = "openai"
    name = "OpenAI"
    default_base_url = "https://api.openai.com/v1"

    def _build_messages(self, messages: list[Message]) -> list[dict[str, Any]]:
        built = []
        for msg in messages:
            if msg.image:
                content: Any = [
                    {"type": "text", "text": msg.content},
                    {"type": "image_url", "image_url": {"url": to_data_url(msg.image)}},
                ]
            else:
                content = msg.content
            built.append({"role": msg.role.value, "content": content})
        return built

    def _build_payload(self, messages: list[Message], config: ModelConfig, stream: bool) -> dict[str, Any]:
        payload = {
            "model": config.model_id,
            "messages": self._build_messages(messages),
            "temperature": config.temperature if config.temperature is not None else 0.7,
            "stream": stream,
        }
        if config.max_tokens is not None:
            payload["max_tokens"] = config.max_tokens
        return payload

    def _headers(self, config: ModelConfig) -> dict[str, str]:
        api_key = self._require_api_key(config)
        return {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}

    async def generate(self, messages: list[Message], config: ModelConfig) -> LLMResponse:
        headers = self._headers(config)
        url = f"{self._base_url(config)}/chat/completions"
        data = await self._request_json(url, self._build_payload(messages, config, False), headers, config)

        content = dig(data, "choices", 0, "message", "content")
        if content is None:
            raise ProtocolError("No valid response from OpenAI API")
        return LLMResponse(
            content=content,
            usage=Usage(
                input_tokens=dig(data, "usage", "prompt_tokens") or 0,
                output_tokens=dig(data, "usage", "completion_tokens") or 0,
            ),
        )

    async def stream(self, messages: list[Message], config: ModelConfig) -> AsyncIterator[StreamChunk]:
        headers = self._headers(config)
        url = f"{self._base_url(config)}/chat/completions"
        payload = self._build_payload(messages, config, True)

        async with self._request(url, payload, headers, config) as response:
            async for line in self._iter_lines(response):
                data = sse_field(line.strip(), "data")
                if data is None:
                    continue
                if data.strip() == DONE_SENTINEL:
                    break
                event = self._decode_event(data)
                if event is None:
                    continue
                content = dig(event, "choices", 0, "delta", "content")
                if content:
                    yield StreamChunk(content=content)
        yield StreamChunk(is_complete=True)
