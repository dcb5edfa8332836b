"""Quick-edit and patch data models"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

from .context import CodePatch, EditorState


class DiffHunk(BaseModel):
    """A single changed region between the buffer before and after a patch"""

    start_line: int  # 1-indexed, in the original buffer
    end_line: int
    original_content: str
    new_content: str
    change_type: Literal["add", "modify", "delete"]


class QuickEditRequest(BaseModel):
    """Replace the editor selection (or whole buffer) following an instruction"""

    model_config = ConfigDict(protected_namespaces=())

    editor: EditorState
    instruction: str
    model_id: str | None = None
    provider_id: str | None = None
    image: str | None = None
    use_selected_element: bool = True


class QuickEditResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    patch: CodePatch
    hunks: list[DiffHunk] = []
    provider: str
    model_id: str


class ApplyPatchRequest(BaseModel):
    """Apply a patch to a buffer, optionally persisting it to ``write_path``"""

    buffer: str
    patch: CodePatch
    write_path: str | None = None


class ApplyPatchResponse(BaseModel):
    content: str
    written: bool = False
