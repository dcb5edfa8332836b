"""Editor, prompt-context and patch data models"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class Range(BaseModel):
    """Editor range, 1-based lines and columns"""

    start_line_number: int
    start_column: int = 1
    end_line_number: int
    end_column: int = 1

    def is_empty(self) -> bool:
        return (
            self.start_line_number == self.end_line_number
            and self.start_column == self.end_column
        )


def position_to_offset(text: str, line_number: int, column: int) -> int:
    """Convert a 1-based (line, column) position into a string offset.

    Positions past the end of a line or of the buffer are clamped, the way
    editor widgets clamp a stale cursor.
    """
    lines = text.split("\n")
    line_index = min(max(line_number, 1), len(lines)) - 1
    offset = sum(len(line) + 1 for line in lines[:line_index])
    return offset + min(max(column, 1) - 1, len(lines[line_index]))


def range_to_offsets(text: str, selection: Range) -> tuple[int, int]:
    """Return ordered (start, end) offsets for a range within ``text``"""
    start = position_to_offset(text, selection.start_line_number, selection.start_column)
    end = position_to_offset(text, selection.end_line_number, selection.end_column)
    return (start, end) if start <= end else (end, start)


class ContextItemType(str, Enum):
    FILE = "file"
    SNIPPET = "snippet"
    SELECTION = "selection"


class ContextItem(BaseModel):
    """One unit of source material included in a prompt"""

    type: ContextItemType
    path: str
    content: str = ""  # empty for selection items, the text lives in the file item
    range: Range | None = None


class EditorState(BaseModel):
    """Snapshot of the editor widget: model uri, buffer and selection"""

    uri: str
    content: str
    selection: Range | None = None

    def line_count(self) -> int:
        return len(self.content.split("\n"))

    def line_content(self, line_number: int) -> str:
        """Text of a 1-based line, without its newline"""
        lines = self.content.split("\n")
        if line_number < 1 or line_number > len(lines):
            raise IndexError(f"Line {line_number} out of range (1-{len(lines)})")
        return lines[line_number - 1]

    def has_selection(self) -> bool:
        return self.selection is not None and not self.selection.is_empty()

    def selected_text(self) -> str | None:
        """Exact selected text, or None when nothing is selected"""
        if not self.has_selection():
            return None
        start, end = range_to_offsets(self.content, self.selection)
        return self.content[start:end]


class CodePatch(BaseModel):
    """Proposed replacement of a bounded region of a file"""

    file_path: str
    original_content: str
    new_content: str
    range: Range | None = None  # None means the whole buffer
    diff: str | None = None
