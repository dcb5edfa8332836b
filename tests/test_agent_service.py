import pytest

from conftest import ScriptedAdapter, make_selector
from synapse_backend.services.agent_service import (
    LIMIT_MESSAGE,
    AgentService,
    ToolCallError,
    parse_tool_call,
)
from synapse_backend.services.workspace_service import WorkspaceService


@pytest.fixture
def project(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.py").write_text("def main():\n    print('hello')\n", encoding="utf-8")
    (tmp_path / "README.md").write_text("# Demo\n", encoding="utf-8")
    (tmp_path / "node_modules").mkdir()
    (tmp_path / "node_modules" / "dep.js").write_text("hello", encoding="utf-8")
    return tmp_path


def _agent(adapter, project, max_steps=5):
    return AgentService(make_selector(adapter), WorkspaceService(str(project)), max_steps=max_steps)


class TestParseToolCall:
    def test_plain_answer(self):
        assert parse_tool_call("The answer is 42.") is None

    def test_tool_with_args(self):
        assert parse_tool_call('TOOL: read_file ARGS: {"path": "a.py"}') == ("read_file", {"path": "a.py"})

    def test_tool_without_args(self):
        assert parse_tool_call("I'll look around.\nTOOL: list_files") == ("list_files", {})

    def test_bad_json_raises(self):
        with pytest.raises(ToolCallError):
            parse_tool_call('TOOL: read_file ARGS: {"path": }')


async def test_answers_without_tools(project):
    adapter = ScriptedAdapter(provider_id="anthropic", replies=["Nothing to do."])

    result = await _agent(adapter, project).run_task("say hi")

    assert result.answer == "Nothing to do."
    assert result.steps == []
    assert not result.limit_reached


async def test_tool_results_are_fed_back(project):
    adapter = ScriptedAdapter(
        provider_id="anthropic",
        replies=['TOOL: read_file ARGS: {"path": "src/main.py"}', "main prints hello"],
    )

    result = await _agent(adapter, project).run_task("what does main do?")

    assert result.answer == "main prints hello"
    assert [s.tool for s in result.steps] == ["read_file"]
    assert "print('hello')" in result.steps[0].result
    second_call = adapter.calls[1][0]
    assert second_call[-1].content.startswith("Tool Result (read_file): def main()")


async def test_list_files_skips_dependency_folders(project):
    adapter = ScriptedAdapter(provider_id="anthropic", replies=["TOOL: list_files ARGS: {}", "done"])

    result = await _agent(adapter, project).run_task("list")

    listed = result.steps[0].result.splitlines()
    assert sorted(listed) == ["README.md", "src/main.py"]


async def test_search_tool(project):
    adapter = ScriptedAdapter(provider_id="anthropic", replies=['TOOL: search ARGS: {"query": "HELLO"}', "done"])

    result = await _agent(adapter, project).run_task("find hello")

    assert result.steps[0].result == "src/main.py"


async def test_tool_errors_are_reported_not_raised(project):
    adapter = ScriptedAdapter(
        provider_id="anthropic",
        replies=['TOOL: read_file ARGS: {"path": "missing.py"}', "TOOL: rm_rf", "gave up"],
    )

    result = await _agent(adapter, project).run_task("read")

    assert result.answer == "gave up"
    assert [s.error for s in result.steps] == [True, True]
    assert result.steps[1].result.startswith("Unknown tool rm_rf")


async def test_stops_at_step_limit(project):
    adapter = ScriptedAdapter(provider_id="anthropic", replies=["TOOL: list_files"] * 3)

    result = await _agent(adapter, project, max_steps=3).run_task("loop forever")

    assert result.limit_reached
    assert result.answer == LIMIT_MESSAGE
    assert len(result.steps) == 3
    assert len(adapter.calls) == 3


async def test_requires_open_workspace():
    adapter = ScriptedAdapter(provider_id="anthropic", replies=["x"])
    agent = AgentService(make_selector(adapter), WorkspaceService())

    with pytest.raises(FileNotFoundError):
        await agent.run_task("anything")
    assert adapter.calls == []


async def test_read_file_cannot_leave_the_workspace(tmp_path):
    project = tmp_path / "project"
    project.mkdir()
    secret = tmp_path / "secret.txt"
    secret.write_text("TOPSECRET", encoding="utf-8")
    adapter = ScriptedAdapter(
        provider_id="anthropic",
        replies=[
            f'TOOL: read_file ARGS: {{"path": "{secret}"}}',
            'TOOL: read_file ARGS: {"path": "../secret.txt"}',
            "refused",
        ],
    )

    result = await _agent(adapter, project).run_task("read the secret")

    assert [s.error for s in result.steps] == [True, True]
    assert all("outside the workspace" in s.result for s in result.steps)
    assert all("TOPSECRET" not in m.content for m in adapter.calls[-1][0])
