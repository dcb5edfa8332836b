import pytest

from synapse_backend.models.llm import Message, ModelConfig, Role
from synapse_backend.services.errors import ConfigurationError, ProtocolError, ProviderError
from synapse_backend.services.providers import OpenAIAdapter
from synapse_backend.services.providers.base import to_data_url


def _messages():
    return [
        Message(role=Role.SYSTEM, content="be brief"),
        Message(role=Role.USER, content="hi"),
    ]


async def test_generate_sends_bearer_request_and_maps_usage(fake_http, openai_config):
    fake_http.queue(
        json_body={
            "choices": [{"message": {"content": "hello there"}}],
            "usage": {"prompt_tokens": 12, "completion_tokens": 4},
        }
    )
    adapter = OpenAIAdapter(session_factory=fake_http.factory)

    response = await adapter.generate(_messages(), openai_config)

    assert response.content == "hello there"
    assert response.usage.input_tokens == 12
    assert response.usage.output_tokens == 4

    call = fake_http.last
    assert call["url"] == "https://api.openai.com/v1/chat/completions"
    assert call["headers"]["Authorization"] == "Bearer sk-test"
    assert call["json"]["model"] == "gpt-4o"
    assert call["json"]["stream"] is False
    assert call["json"]["max_tokens"] == 256
    assert call["json"]["messages"] == [
        {"role": "system", "content": "be brief"},
        {"role": "user", "content": "hi"},
    ]


async def test_generate_uses_base_url_override(fake_http):
    fake_http.queue(json_body={"choices": [{"message": {"content": "ok"}}]})
    adapter = OpenAIAdapter(session_factory=fake_http.factory)
    config = ModelConfig(model_id="gpt-4o", api_key="k", base_url="http://localhost:9000/v1/")

    response = await adapter.generate(_messages(), config)

    assert fake_http.last["url"] == "http://localhost:9000/v1/chat/completions"
    assert response.usage.input_tokens == 0


async def test_defaults_temperature_and_omits_max_tokens(fake_http):
    fake_http.queue(json_body={"choices": [{"message": {"content": "ok"}}]})
    adapter = OpenAIAdapter(session_factory=fake_http.factory)

    await adapter.generate(_messages(), ModelConfig(model_id="gpt-4o", api_key="k"))

    payload = fake_http.last["json"]
    assert payload["temperature"] == 0.7
    assert "max_tokens" not in payload


async def test_image_turn_becomes_content_parts(fake_http, openai_config):
    fake_http.queue(json_body={"choices": [{"message": {"content": "a cat"}}]})
    adapter = OpenAIAdapter(session_factory=fake_http.factory)

    await adapter.generate([Message(role=Role.USER, content="what is this", image="QUJD")], openai_config)

    content = fake_http.last["json"]["messages"][0]["content"]
    assert content[0] == {"type": "text", "text": "what is this"}
    assert content[1]["image_url"]["url"] == "data:image/png;base64,QUJD"


@pytest.mark.parametrize(
    "image, expected",
    [
        ("QUJD", "data:image/png;base64,QUJD"),
        ("data:image/jpeg;base64,QUJD", "data:image/jpeg;base64,QUJD"),
        ("data:;base64,QUJD", "data:image/png;base64,QUJD"),
    ],
)
def test_to_data_url(image, expected):
    assert to_data_url(image) == expected


async def test_missing_api_key_fails_before_any_request(fake_http):
    adapter = OpenAIAdapter(session_factory=fake_http.factory)

    with pytest.raises(ConfigurationError, match="API key not configured"):
        await adapter.generate(_messages(), ModelConfig(model_id="gpt-4o"))
    assert fake_http.calls == []


async def test_error_status_carries_status_and_body(fake_http, openai_config):
    fake_http.queue(status=429, text='{"error": "quota exceeded"}')
    adapter = OpenAIAdapter(session_factory=fake_http.factory)

    with pytest.raises(ProviderError) as exc_info:
        await adapter.generate(_messages(), openai_config)

    assert exc_info.value.status == 429
    assert "quota exceeded" in str(exc_info.value)
    assert str(exc_info.value).startswith("OpenAI API error (429)")


async def test_response_without_content_is_protocol_error(fake_http, openai_config):
    fake_http.queue(json_body={"choices": []})
    adapter = OpenAIAdapter(session_factory=fake_http.factory)

    with pytest.raises(ProtocolError):
        await adapter.generate(_messages(), openai_config)


async def test_stream_yields_deltas_in_order_and_stops_at_done(fake_http, openai_config):
    response = fake_http.queue(
        lines=[
            'data: {"choices":[{"delta":{"role":"assistant"}}]}\n',
            "\n",
            'data: {"choices":[{"delta":{"content":"Hel"}}]}\n',
            'data: {"choices":[{"delta":{"content":"lo"}}]}\n',
            "data: [DONE]\n",
            'data: {"choices":[{"delta":{"content":"ignored"}}]}\n',
        ]
    )
    adapter = OpenAIAdapter(session_factory=fake_http.factory)

    chunks = [chunk async for chunk in adapter.stream(_messages(), openai_config)]

    assert [c.content for c in chunks if not c.is_complete] == ["Hel", "lo"]
    assert chunks[-1].is_complete
    assert sum(1 for c in chunks if c.is_complete) == 1
    assert response.content.consumed == 5
    assert fake_http.last["json"]["stream"] is True


async def test_stream_skips_malformed_chunks(fake_http, openai_config):
    fake_http.queue(
        lines=[
            "data: {not json\n",
            'data: {"choices":[{"delta":{"content":"ok"}}]}\n',
            "data: [DONE]\n",
        ]
    )
    adapter = OpenAIAdapter(session_factory=fake_http.factory)

    chunks = [chunk async for chunk in adapter.stream(_messages(), openai_config)]

    assert [c.content for c in chunks] == ["ok", ""]


async def test_stream_without_body_is_protocol_error(fake_http, openai_config):
    fake_http.queue(no_body=True)
    adapter = OpenAIAdapter(session_factory=fake_http.factory)

    with pytest.raises(ProtocolError, match="No response body"):
        async for _ in adapter.stream(_messages(), openai_config):
            pass


async def test_stream_error_status_raises_before_any_chunk(fake_http, openai_config):
    fake_http.queue(status=401, text="bad key")
    adapter = OpenAIAdapter(session_factory=fake_http.factory)
    received = []

    with pytest.raises(ProviderError):
        async for chunk in adapter.stream(_messages(), openai_config):
            received.append(chunk)
    assert received == []
