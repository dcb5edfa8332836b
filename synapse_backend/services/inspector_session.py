"""Inspector state shared between the preview and the AI operations"""

from __future__ import annotations

import logging

from ..models.inspector import SelectedElementContext

logger = logging.getLogger(__name__)


class InspectorSession:
    """Inspect-mode flag plus the element picked in the preview.

    The selected element lives until the next successful AI call consumes it
    or the user dismisses it; it is never persisted.
    """

    def __init__(self):
        self.active = False
        self._selected: SelectedElementContext | None = None

    @property
    def selected(self) -> SelectedElementContext | None:
        return self._selected

    def toggle(self, active: bool) -> None:
        self.active = active

    def select(self, element: SelectedElementContext) -> None:
        logger.info("Selected <%s> %s (line %s)", element.tag, element.selector, element.line_number)
        self._selected = element

    def dismiss(self) -> None:
        self._selected = None

    def consumed(self, element: SelectedElementContext | None) -> None:
        """Clear the selection once ``element`` was sent in a successful request"""
        if element is not None and element == self._selected:
            self._selected = None
