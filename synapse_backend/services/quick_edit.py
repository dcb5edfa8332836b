"""
Quick Edit Service - Single-shot replacement of the editor selection
"""

from __future__ import annotations

import logging

from ..models.context import CodePatch, EditorState
from ..models.edit import QuickEditRequest, QuickEditResponse
from ..models.inspector import SelectedElementContext
from ..models.llm import Message, Role
from .context_builder import ContextBuilder
from .diff_generator import DiffGenerator
from .inspector_session import InspectorSession
from .model_selection import ModelSelector, Operation
from .patches import replace_range, strip_code_fences
from .prompts import QUICK_EDIT_SYSTEM_PROMPT, quick_edit_user_prompt

logger = logging.getLogger(__name__)


class QuickEditService:
    """Ask the model to rewrite a selection and package the answer as a CodePatch"""

    def __init__(
        self,
        selector: ModelSelector,
        context_builder: ContextBuilder | None = None,
        diff_generator: DiffGenerator | None = None,
        session: InspectorSession | None = None,
    ):
        self.selector = selector
        self.context_builder = context_builder or ContextBuilder()
        self.diff_generator = diff_generator or DiffGenerator()
        self.session = session

    def build_messages(
        self,
        editor: EditorState,
        instruction: str,
        element: SelectedElementContext | None = None,
        image: str | None = None,
    ) -> list[Message]:
        items = self.context_builder.build_quick_edit_context(editor, instruction)
        context = self.context_builder.format_for_prompt(items)
        element_text = self.context_builder.format_element_context(element) if element else None
        user_prompt = quick_edit_user_prompt(context, editor.selected_text(), instruction, element_text)
        return [
            Message(role=Role.SYSTEM, content=QUICK_EDIT_SYSTEM_PROMPT),
            Message(role=Role.USER, content=user_prompt, image=image),
        ]

    async def quick_edit(
        self,
        editor: EditorState,
        instruction: str,
        model_id: str | None = None,
        provider_id: str | None = None,
        element: SelectedElementContext | None = None,
        image: str | None = None,
    ) -> CodePatch:
        patch, _, _ = await self._generate(editor, instruction, model_id, provider_id, element, image)
        return patch

    async def run(self, request: QuickEditRequest) -> QuickEditResponse:
        element = None
        if request.use_selected_element and self.session is not None:
            element = self.session.selected

        patch, provider, model_id = await self._generate(
            request.editor,
            request.instruction,
            request.model_id,
            request.provider_id,
            element,
            request.image,
        )
        if self.session is not None:
            self.session.consumed(element)

        _, patched = replace_range(request.editor.content, patch)
        return QuickEditResponse(
            patch=patch,
            hunks=self.diff_generator.hunks(request.editor.content, patched),
            provider=provider,
            model_id=model_id,
        )

    async def _generate(
        self,
        editor: EditorState,
        instruction: str,
        model_id: str | None,
        provider_id: str | None,
        element: SelectedElementContext | None,
        image: str | None,
    ) -> tuple[CodePatch, str, str]:
        adapter, config = self.selector.select(Operation.QUICK_EDIT, model_id, provider_id)

        selected = editor.selected_text()
        original = selected if selected is not None else editor.content
        messages = self.build_messages(editor, instruction, element, image)

        response = await adapter.generate(messages, config)
        new_content = strip_code_fences(response.content)
        logger.info(
            "Quick edit on %s via %s/%s: %d -> %d chars",
            editor.uri, adapter.id, config.model_id, len(original), len(new_content),
        )

        patch = CodePatch(
            file_path=editor.uri,
            original_content=original,
            new_content=new_content,
            range=editor.selection if selected is not None else None,
        )
        _, patched = replace_range(editor.content, patch)
        patch.diff = self.diff_generator.unified(editor.content, patched, editor.uri)
        return patch, adapter.id, config.model_id
