"""Prompt templates for quick-edit, chat, agent and locator requests"""

from __future__ import annotations

QUICK_EDIT_SYSTEM_PROMPT = """You are an expert coding assistant.
Your task is to modify the provided code based on the user's instruction.
You will be given the full file content and the specific selection to edit.
Return ONLY the new code that should replace the selection.
Do not include any explanation or markdown formatting (unless the code itself is markdown).
If an image is provided, use it as the visual reference for the change.
"""


def quick_edit_user_prompt(
    context: str,
    selection: str | None,
    instruction: str,
    element: str | None = None,
) -> str:
    # The buffer only appears inside the context block
    selection_text = selection if selection is not None else "(the entire file)"
    element_block = f"\nSELECTED ELEMENT:\n{element}\n" if element else ""
    return f"""
FILE CONTENT:
{context}
SELECTION TO EDIT:
{selection_text}
{element_block}
INSTRUCTION:
{instruction}

OUTPUT (Replacement Code Only):
"""


CHAT_SYSTEM_PROMPT = """You are Synapse, an expert coding assistant embedded in a code editor.
Answer concisely. Put code in fenced markdown blocks tagged with their language."""


def agent_system_prompt(tool_descriptions: list[str]) -> str:
    tools = "\n".join(f"- {d}" for d in tool_descriptions)
    return f"""You are an autonomous coding agent.
You have access to tools:
{tools}
To use a tool, reply with: TOOL: <name> ARGS: <json_args>.
Otherwise, reply with your answer."""


LOCATE_SYSTEM_PROMPT = """You map an element from a rendered web page back to the source file that produced it.
Reply with ONLY the 1-based line number where the element starts. No other text."""


def locate_user_prompt(
    tag: str,
    text: str | None,
    element_id: str | None,
    class_name: str | None,
    source: str,
) -> str:
    numbered = "\n".join(f"{i}: {line}" for i, line in enumerate(source.split("\n"), start=1))
    return f"""ELEMENT:
tag: {tag}
text: {text or ''}
id: {element_id or ''}
class: {class_name or ''}

SOURCE:
{numbered}

LINE NUMBER:"""
