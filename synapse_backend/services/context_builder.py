"""
Context Builder - Assemble editor state into labeled prompt context
"""

from __future__ import annotations

from ..models.context import ContextItem, ContextItemType, EditorState
from ..models.inspector import SelectedElementContext


class ContextBuilder:
    """Turn editor state into context items and render them for a prompt"""

    def build_quick_edit_context(self, editor: EditorState, instruction: str) -> list[ContextItem]:
        """One item for the full buffer, plus a range-only item for a non-empty selection.

        Related files (import-graph neighbours) are not gathered yet.
        """
        items = [
            ContextItem(type=ContextItemType.FILE, path=editor.uri, content=editor.content),
        ]
        if editor.has_selection():
            items.append(
                ContextItem(type=ContextItemType.SELECTION, path=editor.uri, range=editor.selection)
            )
        return items

    def format_for_prompt(self, items: list[ContextItem]) -> str:
        output = ""
        for item in items:
            if item.type == ContextItemType.FILE:
                output += f"File: {item.path}\n```\n{item.content}\n```\n\n"
            elif item.type == ContextItemType.SNIPPET:
                output += f"Snippet from {item.path}:\n```\n{item.content}\n```\n\n"
            elif item.type == ContextItemType.SELECTION and item.range is not None:
                output += (
                    f"Selection in {item.path}: "
                    f"Lines {item.range.start_line_number}-{item.range.end_line_number}\n"
                )
        return output

    def format_element_context(self, element: SelectedElementContext) -> str:
        line = f" at line {element.line_number}" if element.line_number else ""
        return f"<{element.tag}> {element.selector}{line}\n```html\n{element.snippet}\n```"
