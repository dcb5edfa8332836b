"""Anthropic messages adapter"""

from __future__ import annotations

from typing import Any, AsyncIterator

from ...models.llm import LLMResponse, Message, ModelConfig, Role, StreamChunk, Usage
from ..errors import ProtocolError, ProviderError
from .base import ProviderAdapter, dig, split_data_url, sse_field

ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_MAX_TOKENS = 4096

# HTTP status Anthropic documents for each error type
ERROR_STATUS = {
    "invalid_request_error": 400,
    "authentication_error": 401,
    "permission_error": 403,
    "not_found_error": 404,
    "request_too_large": 413,
    "rate_limit_error": 429,
    "api_error": 500,
    "overloaded_error": 529,
}


class AnthropicAdapter(ProviderAdapter):
    """``/messages`` backend; system turns travel in a top-level field"""

    id = "anthropic"
    name = "Anthropic"
    default_base_url = "https://api.anthropic.com/v1"

    def _split_system(self, messages: list[Message]) -> tuple[str | None, list[Message]]:
        system = [m.content for m in messages if m.role == Role.SYSTEM]
        turns = [m for m in messages if m.role != Role.SYSTEM]
        return ("\n\n".join(system) if system else None), turns

    def _build_turn(self, msg: Message) -> dict[str, Any]:
        if not msg.image:
            return {"role": msg.role.value, "content": msg.content}
        mime, data = split_data_url(msg.image)
        return {
            "role": msg.role.value,
            "content": [
                {"type": "image", "source": {"type": "base64", "media_type": mime, "data": data}},
                {"type": "text", "text": msg.content},
            ],
        }

    def _build_payload(self, messages: list[Message], config: ModelConfig, stream: bool) -> dict[str, Any]:
        system, turns = self._split_system(messages)
        payload: dict[str, Any] = {
            "model": config.model_id,
            "messages": [self._build_turn(m) for m in turns],
            "max_tokens": config.max_tokens or DEFAULT_MAX_TOKENS,
            "temperature": config.temperature if config.temperature is not None else 0.7,
            "stream": stream,
        }
        if system is not None:
            payload["system"] = system
        return payload

    def _headers(self, config: ModelConfig) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self._require_api_key(config),
            "anthropic-version": ANTHROPIC_VERSION,
        }

    async def generate(self, messages: list[Message], config: ModelConfig) -> LLMResponse:
        headers = self._headers(config)
        url = f"{self._base_url(config)}/messages"
        data = await self._request_json(url, self._build_payload(messages, config, False), headers, config)

        content = dig(data, "content", 0, "text")
        if content is None:
            raise ProtocolError("No valid response from Anthropic API")
        return LLMResponse(
            content=content,
            usage=Usage(
                input_tokens=dig(data, "usage", "input_tokens") or 0,
                output_tokens=dig(data, "usage", "output_tokens") or 0,
            ),
        )

    async def stream(self, messages: list[Message], config: ModelConfig) -> AsyncIterator[StreamChunk]:
        headers = self._headers(config)
        url = f"{self._base_url(config)}/messages"
        payload = self._build_payload(messages, config, True)

        async with self._request(url, payload, headers, config) as response:
            async for line in self._iter_lines(response):
                # event: lines only name the type, which data payloads repeat
                data = sse_field(line, "data")
                if data is None:
                    continue
                event = self._decode_event(data)
                if event is None:
                    continue
                event_type = event.get("type")
                if event_type == "content_block_delta":
                    text = dig(event, "delta", "text")
                    if text:
                        yield StreamChunk(content=text)
                elif event_type == "message_stop":
                    break
                elif event_type == "error":
                    # the HTTP status is already 200 here
                    error_type = dig(event, "error", "type") or "error"
                    raise ProviderError(self.name, ERROR_STATUS.get(error_type, 500), data, error_type=error_type)
        yield StreamChunk(is_complete=True)
