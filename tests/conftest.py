"""Shared fixtures: a scripted aiohttp stand-in and a scripted provider adapter."""

from __future__ import annotations

from typing import Any, AsyncIterator

import pytest

from synapse_backend.models.llm import LLMResponse, Message, ModelConfig, StreamChunk, Usage
from synapse_backend.models.settings import ProviderCredentials, Settings
from synapse_backend.services.local_store import LocalStore
from synapse_backend.services.model_selection import ModelSelector
from synapse_backend.services.providers import ProviderAdapter, ProviderRouter

# ---------------------------------------------------------------------------
# Fake aiohttp session
# ---------------------------------------------------------------------------


class FakeContent:
    """Async-iterable body yielding raw lines, like aiohttp's StreamReader."""

    def __init__(self, lines: list[str]):
        self.lines = lines
        self.consumed = 0

    async def _iterate(self):
        for line in self.lines:
            self.consumed += 1
            yield line.encode("utf-8")

    def __aiter__(self):
        return self._iterate()


class FakeResponse:
    def __init__(self, status: int = 200, json_body: Any = None, text: str = "", lines: list[str] | None = None, no_body: bool = False):
        self.status = status
        self._json = json_body
        self._text = text
        self.content = None if no_body else FakeContent(lines or [])

    async def json(self, content_type=None):
        if self._json is None:
            raise ValueError("no json")
        return self._json

    async def text(self):
        return self._text

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, http: "FakeHTTP"):
        self.http = http

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def post(self, url, json=None, headers=None):
        self.http.calls.append({"url": url, "json": json, "headers": headers})
        return self.http.responses.pop(0)


class FakeHTTP:
    """Queue of canned responses plus a record of every POST."""

    def __init__(self):
        self.responses: list[FakeResponse] = []
        self.calls: list[dict] = []
        self.timeouts: list = []

    def queue(self, **kwargs) -> FakeResponse:
        response = FakeResponse(**kwargs)
        self.responses.append(response)
        return response

    def factory(self, timeout):
        self.timeouts.append(timeout)
        return FakeSession(self)

    @property
    def last(self) -> dict:
        return self.calls[-1]


@pytest.fixture
def fake_http() -> FakeHTTP:
    return FakeHTTP()


# ---------------------------------------------------------------------------
# Scripted adapter for service-level tests
# ---------------------------------------------------------------------------


class ScriptedAdapter(ProviderAdapter):
    """Returns canned replies in order and records what it was sent."""

    def __init__(self, provider_id: str = "openai", replies: list[str] | None = None, error: Exception | None = None):
        super().__init__()
        self.id = provider_id
        self.name = provider_id.title()
        self.replies = list(replies or [])
        self.error = error
        self.calls: list[tuple[list[Message], ModelConfig]] = []

    async def generate(self, messages, config):
        self.calls.append((list(messages), config))
        if self.error:
            raise self.error
        return LLMResponse(content=self.replies.pop(0), usage=Usage(input_tokens=3, output_tokens=5))

    async def stream(self, messages, config) -> AsyncIterator[StreamChunk]:
        self.calls.append((list(messages), config))
        if self.error:
            raise self.error
        for piece in self.replies:
            yield StreamChunk(content=piece)
        yield StreamChunk(is_complete=True)


def make_selector(*adapters: ProviderAdapter, settings: Settings | None = None) -> ModelSelector:
    router = ProviderRouter()
    for adapter in adapters:
        router.register(adapter)
    if adapters:
        router.set_default(adapters[0].id)
    settings = settings or Settings()
    settings.providers["openai"] = ProviderCredentials(api_key="sk-test")
    return ModelSelector(router, lambda: settings)


@pytest.fixture
def openai_config() -> ModelConfig:
    return ModelConfig(model_id="gpt-4o", api_key="sk-test", temperature=0.1, max_tokens=256)


@pytest.fixture
def store(tmp_path) -> LocalStore:
    return LocalStore(tmp_path / "store.json")
