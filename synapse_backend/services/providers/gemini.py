"""Google Gemini adapter"""

from __future__ import annotations

from typing import Any, AsyncIterator

from ...models.llm import LLMResponse, Message, ModelConfig, Role, StreamChunk, Usage
from .base import ProviderAdapter, dig, split_data_url, sse_field

DEFAULT_MODEL = "gemini-pro"
PLACEHOLDER_TURN = "Hello"


def build_gemini_contents(messages: list[Message]) -> tuple[str | None, list[dict[str, Any]]]:
    """Reshape a conversation into Gemini ``contents`` plus a system instruction.

    Gemini rejects conversations that do not open with a user turn or that
    repeat a role back to back, so leading non-user turns are dropped and
    consecutive same-role turns are merged with a blank line. An empty result
    gets a single placeholder user turn.
    """
    system_parts = [m.content for m in messages if m.role == Role.SYSTEM]
    contents: list[dict[str, Any]] = []

    for msg in messages:
        if msg.role == Role.SYSTEM:
            continue
        role = "user" if msg.role == Role.USER else "model"

        if not contents and role != "user":
            continue

        if contents and contents[-1]["role"] == role:
            contents[-1]["parts"][0]["text"] += f"\n\n{msg.content}"
        else:
            contents.append({"role": role, "parts": [{"text": msg.content}]})

        if msg.image:
            mime, data = split_data_url(msg.image)
            contents[-1]["parts"].append({"inline_data": {"mime_type": mime, "data": data}})

    if not contents:
        contents.append({"role": "user", "parts": [{"text": PLACEHOLDER_TURN}]})

    system = "\n\n".join(system_parts) if system_parts else None
    return system, contents


class GeminiAdapter(ProviderAdapter):
    """Per-model REST backend with the API key as a query parameter"""

    id = "gemini"
    name = "Google Gemini"
    default_base_url = "https://generativelanguage.googleapis.com/v1beta"

    def _model_url(self, config: ModelConfig, method: str) -> str:
        model = config.model_id or DEFAULT_MODEL
        return f"{self._base_url(config)}/models/{model}:{method}"

    def _build_payload(self, messages: list[Message], config: ModelConfig) -> dict[str, Any]:
        system, contents = build_gemini_contents(messages)
        generation_config: dict[str, Any] = {}
        if config.temperature is not None:
            generation_config["temperature"] = config.temperature
        if config.max_tokens is not None:
            generation_config["maxOutputTokens"] = config.max_tokens

        payload: dict[str, Any] = {"contents": contents, "generationConfig": generation_config}
        if system is not None:
            payload["system_instruction"] = {"parts": [{"text": system}]}
        return payload

    @staticmethod
    def _extract_text(data: dict[str, Any]) -> str:
        return dig(data, "candidates", 0, "content", "parts", 0, "text") or ""

    async def generate(self, messages: list[Message], config: ModelConfig) -> LLMResponse:
        api_key = self._require_api_key(config)
        url = f"{self._model_url(config, 'generateContent')}?key={api_key}"
        headers = {"Content-Type": "application/json"}
        data = await self._request_json(url, self._build_payload(messages, config), headers, config)

        return LLMResponse(
            content=self._extract_text(data),
            usage=Usage(
                input_tokens=dig(data, "usageMetadata", "promptTokenCount") or 0,
                output_tokens=dig(data, "usageMetadata", "candidatesTokenCount") or 0,
            ),
        )

    async def stream(self, messages: list[Message], config: ModelConfig) -> AsyncIterator[StreamChunk]:
        api_key = self._require_api_key(config)
        url = f"{self._model_url(config, 'streamGenerateContent')}?alt=sse&key={api_key}"
        headers = {"Content-Type": "application/json"}
        payload = self._build_payload(messages, config)

        async with self._request(url, payload, headers, config) as response:
            async for line in self._iter_lines(response):
                data = sse_field(line, "data")
                if data is None or data.strip() == "[DONE]":
                    continue
                event = self._decode_event(data)
                if event is None:
                    continue
                text = self._extract_text(event)
                if text:
                    yield StreamChunk(content=text)
        yield StreamChunk(is_complete=True)
