"""Code-fence cleanup and range-keyed patch application"""

from __future__ import annotations

import re

from ..models.context import CodePatch, range_to_offsets
from .errors import PatchConflictError

_LEADING_FENCE = re.compile(r"^```[\w.+#-]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?```[ \t]*$")


def strip_code_fences(text: str) -> str:
    """Remove markdown fences opening and closing the text.

    Stacked fences are peeled until none remain at either end, so the result
    is a fixed point: stripping twice equals stripping once.
    """
    while True:
        stripped = _LEADING_FENCE.sub("", text, count=1)
        stripped = _TRAILING_FENCE.sub("", stripped, count=1)
        if stripped == text:
            return text
        text = stripped


def replace_range(buffer: str, patch: CodePatch) -> tuple[str, str]:
    """Return (text currently at the patch range, buffer with it replaced)"""
    if patch.range is None:
        return buffer, patch.new_content
    start, end = range_to_offsets(buffer, patch.range)
    return buffer[start:end], buffer[:start] + patch.new_content + buffer[end:]


def apply_patch(buffer: str, patch: CodePatch) -> str:
    """Replace the patch's range in ``buffer`` with its new content.

    The region must still hold ``patch.original_content``; a buffer edited
    since the patch was produced raises PatchConflictError.
    """
    current, patched = replace_range(buffer, patch)
    if current != patch.original_content:
        raise PatchConflictError(f"{patch.file_path} changed since the patch was generated")
    return patched
