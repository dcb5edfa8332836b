from conftest import ScriptedAdapter, make_selector
from synapse_backend.models.chat import RecordType
from synapse_backend.models.inspector import SelectedElementContext
from synapse_backend.models.llm import Message, Role
from synapse_backend.services.chat_service import (
    ChatService,
    ChatTranscriptStore,
    extract_code_blocks,
    new_record,
)
from synapse_backend.services.prompts import CHAT_SYSTEM_PROMPT


def test_extract_code_blocks():
    content = "Here:\n```python\nprint(1)\n```\nand\n```\nraw\n```"
    blocks = extract_code_blocks(content)
    assert [(b.language, b.code) for b in blocks] == [("python", "print(1)"), ("text", "raw")]


def test_new_record_marks_code_replies():
    assert new_record(Role.ASSISTANT, "```js\nx\n```").type == RecordType.CODE
    assert new_record(Role.ASSISTANT, "plain").type == RecordType.TEXT
    assert new_record(Role.USER, "```js\nx\n```").type == RecordType.TEXT


class TestTranscriptStore:
    def test_append_and_reload_in_order(self, store):
        transcript = ChatTranscriptStore(store)
        transcript.append(new_record(Role.USER, "q1"), new_record(Role.ASSISTANT, "a1"))
        transcript.append(new_record(Role.USER, "q2"))

        reloaded = ChatTranscriptStore(store).load()
        assert [r.content for r in reloaded] == ["q1", "a1", "q2"]

    def test_history_skips_error_records(self, store):
        transcript = ChatTranscriptStore(store)
        error = new_record(Role.ASSISTANT, "Error: boom").model_copy(update={"type": RecordType.ERROR})
        transcript.append(new_record(Role.USER, "q"), error, new_record(Role.ASSISTANT, "a"))

        assert [m.content for m in transcript.history()] == ["q", "a"]

    def test_clear(self, store):
        transcript = ChatTranscriptStore(store)
        transcript.append(new_record(Role.USER, "q"))
        transcript.clear()
        assert transcript.load() == []

    def test_unreadable_records_are_dropped(self, store):
        store.set("synapse.chat.v1", [{"id": "1", "role": "user", "content": "ok"}, {"bogus": True}])
        assert [r.id for r in ChatTranscriptStore(store).load()] == ["1"]


class TestChatService:
    def test_build_messages_adds_system_prompt_once(self):
        service = ChatService(make_selector(ScriptedAdapter()))
        history = [Message(role=Role.USER, content="q"), Message(role=Role.ASSISTANT, content="a")]

        messages = service.build_messages(history, "next")

        assert messages[0] == Message(role=Role.SYSTEM, content=CHAT_SYSTEM_PROMPT)
        assert [m.content for m in messages[1:]] == ["q", "a", "next"]
        assert history == [Message(role=Role.USER, content="q"), Message(role=Role.ASSISTANT, content="a")]

    def test_build_messages_keeps_existing_system_turn(self):
        service = ChatService(make_selector(ScriptedAdapter()))
        messages = service.build_messages([Message(role=Role.SYSTEM, content="custom")], "q")
        assert [m.content for m in messages] == ["custom", "q"]

    def test_element_is_appended_to_user_turn(self):
        service = ChatService(make_selector(ScriptedAdapter()))
        element = SelectedElementContext(tag="nav", selector="nav#top", line_number=2)

        messages = service.build_messages([], "what is this?", element)

        assert messages[-1].content.startswith("what is this?\n\nSELECTED ELEMENT:\n<nav> nav#top")

    async def test_chat_returns_response_and_provider(self):
        adapter = ScriptedAdapter(replies=["answer"])
        service = ChatService(make_selector(adapter))

        response, provider = await service.chat([], "question", image="QUJD")

        assert response.content == "answer"
        assert provider == "openai"
        assert adapter.calls[0][0][-1].image == "QUJD"

    async def test_stream_chat_forwards_chunks(self):
        adapter = ScriptedAdapter(replies=["a", "b"])
        service = ChatService(make_selector(adapter))

        chunks = [c async for c in service.stream_chat([], "q")]

        assert [c.content for c in chunks] == ["a", "b", ""]
        assert chunks[-1].is_complete
