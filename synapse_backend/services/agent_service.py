"""
Agent Service - Bounded tool-calling loop over the workspace
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable

from ..models.agent import AgentResult, AgentStep, ToolName
from ..models.llm import Message, Role
from .model_selection import ModelSelector, Operation
from .prompts import agent_system_prompt
from .workspace_service import WorkspaceService

logger = logging.getLogger(__name__)

MAX_STEPS = 5
MAX_TOOL_OUTPUT = 8000
LIMIT_MESSAGE = "Task limit reached"

_TOOL_CALL = re.compile(r"TOOL:\s*([\w.-]+)(?:\s*ARGS:\s*(.*))?", re.DOTALL)


@dataclass
class AgentTool:
    name: str
    description: str
    execute: Callable[[dict[str, Any], Path], Awaitable[str]]


class ToolCallError(Exception):
    """The model asked for a tool the loop cannot run"""


def parse_tool_call(content: str) -> tuple[str, dict[str, Any]] | None:
    """Parse ``TOOL: <name> ARGS: <json>`` from a reply; None when it is an answer"""
    match = _TOOL_CALL.search(content)
    if not match:
        return None
    name, raw_args = match.group(1), (match.group(2) or "").strip()
    if not raw_args:
        return name, {}

    brace_start = raw_args.find("{")
    brace_end = raw_args.rfind("}") + 1
    if brace_start < 0 or brace_end <= brace_start:
        raise ToolCallError(f"ARGS for {name} must be a JSON object")
    try:
        args = json.loads(raw_args[brace_start:brace_end])
    except json.JSONDecodeError as e:
        raise ToolCallError(f"Invalid ARGS JSON for {name}: {e}") from e
    return name, args


class AgentService:
    """ReAct-style loop: the model either calls a tool or answers"""

    def __init__(self, selector: ModelSelector, workspace: WorkspaceService, max_steps: int = MAX_STEPS):
        self.selector = selector
        self.workspace = workspace
        self.max_steps = max_steps
        self.tools: dict[str, AgentTool] = {}
        self._register_default_tools()

    def register_tool(self, tool: AgentTool) -> None:
        self.tools[tool.name] = tool

    def _register_default_tools(self) -> None:
        self.register_tool(
            AgentTool(
                ToolName.READ_FILE.value,
                'read_file: Read contents of a file. Args: {"path": string}',
                self._read_file,
            )
        )
        self.register_tool(
            AgentTool(
                ToolName.LIST_FILES.value,
                "list_files: List project files. Args: {}",
                self._list_files,
            )
        )
        self.register_tool(
            AgentTool(
                ToolName.SEARCH.value,
                'search: Find files containing text. Args: {"query": string}',
                self._search,
            )
        )

    # ========== Tools ==========

    async def _read_file(self, args: dict[str, Any], root: Path) -> str:
        path = args.get("path")
        if not isinstance(path, str) or not path:
            raise ToolCallError("read_file requires a 'path' string")
        target = Path(path)
        if not target.is_absolute():
            target = root / target
        return await self.workspace.read_file(str(target))

    async def _list_files(self, args: dict[str, Any], root: Path) -> str:
        files = await self.workspace.list_files(str(root))
        return "\n".join(str(Path(f).relative_to(root)) for f in files)

    async def _search(self, args: dict[str, Any], root: Path) -> str:
        query = args.get("query")
        if not isinstance(query, str) or not query:
            raise ToolCallError("search requires a 'query' string")
        items = await self.workspace.search(query, str(root))
        return "\n".join(str(Path(item.path).relative_to(root)) for item in items) or "No matches"

    # ========== Loop ==========

    async def _run_tool(self, name: str, args: dict[str, Any], root: Path) -> tuple[str, bool]:
        tool = self.tools.get(name)
        if tool is None:
            return f"Unknown tool {name}. Available: {', '.join(self.tools)}", True
        try:
            result = await tool.execute(args, root)
        except (ToolCallError, OSError, UnicodeDecodeError, ValueError) as e:
            return f"Error: {e}", True
        return result[:MAX_TOOL_OUTPUT], False

    async def run_task(
        self,
        task: str,
        root: str | None = None,
        model_id: str | None = None,
        provider_id: str | None = None,
    ) -> AgentResult:
        adapter, config = self.selector.select(Operation.AGENT, model_id, provider_id)
        workspace_root = self.workspace.resolve_root(root)

        messages = [
            Message(
                role=Role.SYSTEM,
                content=agent_system_prompt([t.description for t in self.tools.values()]),
            ),
            Message(role=Role.USER, content=task),
        ]
        steps: list[AgentStep] = []

        while len(steps) < self.max_steps:
            response = await adapter.generate(messages, config)
            content = response.content
            messages.append(Message(role=Role.ASSISTANT, content=content))

            try:
                call = parse_tool_call(content)
            except ToolCallError as e:
                result = f"Error: {e}"
                steps.append(AgentStep(step_number=len(steps) + 1, tool="?", result=result, error=True))
                messages.append(Message(role=Role.USER, content=f"Tool Result: {result}"))
                continue

            if call is None:
                return AgentResult(answer=content, steps=steps)

            name, args = call
            result, failed = await self._run_tool(name, args, workspace_root)
            logger.info("Agent step %d: %s -> %s", len(steps) + 1, name, "error" if failed else "ok")
            steps.append(
                AgentStep(step_number=len(steps) + 1, tool=name, args=args, result=result, error=failed)
            )
            messages.append(Message(role=Role.USER, content=f"Tool Result ({name}): {result}"))

        return AgentResult(answer=LIMIT_MESSAGE, steps=steps, limit_reached=True)
