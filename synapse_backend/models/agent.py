"""Agent mode data models"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class ToolName(str, Enum):
    """Available tools for agent execution"""

    READ_FILE = "read_file"
    LIST_FILES = "list_files"
    SEARCH = "search"


class AgentStep(BaseModel):
    """A single tool invocation made by the agent"""

    step_number: int
    tool: str
    args: dict[str, Any] = {}
    result: str
    error: bool = False


class AgentRequest(BaseModel):
    """Request to run an agent task"""

    model_config = ConfigDict(protected_namespaces=())

    task: str
    root: str | None = None  # defaults to the open workspace folder
    model_id: str | None = None
    provider_id: str | None = None


class AgentResult(BaseModel):
    """Final answer plus the tool trace that produced it"""

    answer: str
    steps: list[AgentStep] = []
    limit_reached: bool = False
