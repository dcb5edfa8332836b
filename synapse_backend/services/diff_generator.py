"""
Diff Generator - Unified diffs and change hunks for code patches
"""

from __future__ import annotations

from difflib import SequenceMatcher, unified_diff

from ..models.edit import DiffHunk


def _lines(content: str) -> list[str]:
    lines = content.splitlines(keepends=True)
    # Ensure last lines have newlines for proper diff
    if lines and not lines[-1].endswith("\n"):
        lines[-1] += "\n"
    return lines


class DiffGenerator:
    """Describe the change between a buffer before and after a patch"""

    def unified(self, original_content: str, new_content: str, file_path: str) -> str:
        return "".join(
            unified_diff(
                _lines(original_content),
                _lines(new_content),
                fromfile=f"a/{file_path}",
                tofile=f"b/{file_path}",
            )
        )

    def hunks(self, original_content: str, new_content: str) -> list[DiffHunk]:
        original = _lines(original_content)
        modified = _lines(new_content)
        matcher = SequenceMatcher(None, original, modified)

        hunks = []
        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == "equal":
                continue
            change_type = "add" if tag == "insert" else "delete" if tag == "delete" else "modify"
            hunks.append(
                DiffHunk(
                    start_line=i1 + 1,
                    end_line=i2,
                    original_content="".join(original[i1:i2]),
                    new_content="".join(modified[j1:j2]),
                    change_type=change_type,
                )
            )
        return hunks
