"""
Element Locator - Map an element clicked in the preview to a source line

Local textual search runs first and the model is only asked when no line
matches. The first line-order match wins; no structural verification is
attempted.
"""

from __future__ import annotations

import logging
import re

from ..models.inspector import (
    ElementClickedPayload,
    LocateMethod,
    LocateResult,
    SelectedElementContext,
)
from ..models.llm import Message, Role
from .dom_selector import describe_element_at
from .model_selection import ModelSelector, Operation
from .prompts import LOCATE_SYSTEM_PROMPT, locate_user_prompt

logger = logging.getLogger(__name__)

# Text fragments this short or shorter are not searched
MIN_TEXT_LENGTH = 3
TEXT_FRAGMENT_LENGTH = 40


def _text_fragment(text: str | None) -> str | None:
    if not text:
        return None
    fragment = text.strip()[:TEXT_FRAGMENT_LENGTH].strip()
    return fragment if len(fragment) > MIN_TEXT_LENGTH else None


def find_line_locally(source: str, payload: ElementClickedPayload) -> tuple[int, LocateMethod] | None:
    """First matching 1-based line by id, then text, then opening tag"""
    lines = source.split("\n")

    if payload.id:
        needles = (f'id="{payload.id}"', f"id='{payload.id}'")
        for number, line in enumerate(lines, start=1):
            if any(n in line for n in needles):
                return number, LocateMethod.ID

    fragment = _text_fragment(payload.text)
    if fragment:
        for number, line in enumerate(lines, start=1):
            if fragment in line:
                return number, LocateMethod.TEXT

    opening_tag = re.compile(rf"<{re.escape(payload.tag)}(?=[\s>/]|$)", re.IGNORECASE)
    for number, line in enumerate(lines, start=1):
        if opening_tag.search(line):
            return number, LocateMethod.TAG

    return None


def parse_line_number(text: str, line_count: int | None = None) -> int | None:
    """First run of digits in a model reply; None when absent or out of range"""
    match = re.search(r"\d+", text or "")
    if not match:
        return None
    number = int(match.group())
    if number <= 0 or (line_count is not None and number > line_count):
        return None
    return number


class ElementLocator:
    """Two-phase lookup: local search, then an AI fallback"""

    def __init__(self, selector: ModelSelector | None = None):
        self.selector = selector

    async def ask_model(
        self,
        source: str,
        payload: ElementClickedPayload,
        model_id: str | None = None,
        provider_id: str | None = None,
    ) -> int | None:
        adapter, config = self.selector.select(Operation.LOCATE, model_id, provider_id)
        messages = [
            Message(role=Role.SYSTEM, content=LOCATE_SYSTEM_PROMPT),
            Message(
                role=Role.USER,
                content=locate_user_prompt(payload.tag, payload.text, payload.id, payload.class_name, source),
            ),
        ]
        response = await adapter.generate(messages, config)
        return parse_line_number(response.content, len(source.split("\n")))

    async def locate(
        self,
        source: str,
        payload: ElementClickedPayload,
        model_id: str | None = None,
        provider_id: str | None = None,
        use_ai: bool = True,
    ) -> LocateResult:
        found = find_line_locally(source, payload)
        if found is not None:
            line_number, method = found
        elif use_ai and self.selector is not None:
            line_number = await self.ask_model(source, payload, model_id, provider_id)
            method = LocateMethod.AI if line_number is not None else LocateMethod.MISS
        else:
            line_number, method = None, LocateMethod.MISS

        selector, snippet = payload.selector, payload.snippet
        if line_number is not None and not (selector and snippet):
            described = describe_element_at(source, payload.tag, line_number)
            if described is not None:
                selector = selector or described[0]
                snippet = snippet or described[1]

        logger.info("Located <%s> %s: line %s via %s", payload.tag, selector, line_number, method.value)
        return LocateResult(
            line_number=line_number,
            method=method,
            element=SelectedElementContext(
                tag=payload.tag,
                selector=selector,
                line_number=line_number,
                snippet=snippet,
            ),
        )
