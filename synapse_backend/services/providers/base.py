"""
Provider adapter contract and the HTTP plumbing shared by all adapters.

Each adapter turns a role-tagged message list plus a ModelConfig into one
provider-specific HTTP request and parses the reply back into LLMResponse /
StreamChunk. Request shaping rules stay inside the concrete adapter.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Optional

import aiohttp

from ...models.llm import LLMResponse, Message, ModelConfig, StreamChunk
from ..errors import ConfigurationError, ProtocolError, ProviderError

logger = logging.getLogger(__name__)

SessionFactory = Callable[[aiohttp.ClientTimeout], aiohttp.ClientSession]


def _default_session(timeout: aiohttp.ClientTimeout) -> aiohttp.ClientSession:
    return aiohttp.ClientSession(timeout=timeout)


def dig(data: Any, *path: Any) -> Any:
    """Walk nested dicts/lists, returning None as soon as a step is missing"""
    current = data
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or len(current) <= key:
                return None
        elif not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


def sse_field(line: str, name: str) -> Optional[str]:
    """Return the value of an SSE ``name:`` line, or None for other lines"""
    prefix = f"{name}:"
    if not line.startswith(prefix):
        return None
    value = line[len(prefix):]
    return value[1:] if value.startswith(" ") else value


def split_data_url(image: str) -> tuple[str, str]:
    """Split ``data:<mime>;base64,<data>`` into (mime, data); raw base64 is PNG"""
    if image.startswith("data:") and "," in image:
        header, data = image.split(",", 1)
        mime = header[5:].split(";", 1)[0] or "image/png"
        return mime, data
    return "image/png", image


def to_data_url(image: str) -> str:
    """Normalize an image (data URL or raw base64) to ``data:<mime>;base64,<data>``"""
    mime, data = split_data_url(image)
    return f"data:{mime};base64,{data}"


class ProviderAdapter(ABC):
    """Capability contract every backend adapter implements"""

    id: str = ""
    name: str = ""
    default_base_url: str = ""

    def __init__(self, session_factory: SessionFactory | None = None):
        self._session_factory = session_factory or _default_session

    @abstractmethod
    async def generate(self, messages: list[Message], config: ModelConfig) -> LLMResponse:
        """Single blocking round trip"""

    @abstractmethod
    def stream(self, messages: list[Message], config: ModelConfig) -> AsyncIterator[StreamChunk]:
        """Incremental round trip; always ends with one ``is_complete`` chunk"""

    # ========== Shared Helpers ==========

    def _base_url(self, config: ModelConfig) -> str:
        return (config.base_url or self.default_base_url).rstrip("/")

    def _require_api_key(self, config: ModelConfig) -> str:
        if not config.api_key:
            raise ConfigurationError(f"{self.name} API key not configured")
        return config.api_key

    @asynccontextmanager
    async def _request(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str],
        config: ModelConfig,
    ):
        """POST ``payload`` and yield the response, failing on non-2xx status"""
        timeout = aiohttp.ClientTimeout(total=config.timeout_seconds)
        logger.info("Calling %s with model %s", self.name, config.model_id)
        async with self._session_factory(timeout) as session:
            async with session.post(url, json=payload, headers=headers) as response:
                if not 200 <= response.status < 300:
                    error_text = await response.text()
                    logger.error("%s API error (%s): %s", self.name, response.status, error_text)
                    raise ProviderError(self.name, response.status, error_text)
                yield response

    async def _request_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str],
        config: ModelConfig,
    ) -> dict[str, Any]:
        async with self._request(url, payload, headers, config) as response:
            try:
                data = await response.json(content_type=None)
            except (aiohttp.ContentTypeError, ValueError) as e:
                raise ProtocolError(f"{self.name} returned a non-JSON body: {e}") from e
        if not isinstance(data, dict):
            raise ProtocolError(f"{self.name} returned an unexpected body: {data!r}")
        return data

    async def _iter_lines(self, response: aiohttp.ClientResponse) -> AsyncIterator[str]:
        """Yield decoded lines of a streaming body in arrival order"""
        if response.content is None:
            raise ProtocolError(f"No response body from {self.name}")
        async for line in response.content:
            yield line.decode("utf-8", errors="replace").rstrip("\r\n")

    def _decode_event(self, data: str) -> dict[str, Any] | None:
        """Parse one event payload; malformed payloads are logged and skipped"""
        try:
            event = json.loads(data)
        except json.JSONDecodeError:
            logger.warning("Skipping malformed %s stream chunk: %.200s", self.name, data)
            return None
        if not isinstance(event, dict):
            logger.warning("Skipping unexpected %s stream chunk: %.200s", self.name, data)
            return None
        return event
