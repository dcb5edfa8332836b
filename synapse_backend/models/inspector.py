"""Preview inspector wire messages and locator results"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Message type strings are shared with static/inspector.js
TOGGLE_INSPECTOR = "TOGGLE_INSPECTOR"
ELEMENT_CLICKED = "ELEMENT_CLICKED"


class ElementClickedPayload(BaseModel):
    """Element description posted by the preview on an inspector click"""

    model_config = ConfigDict(populate_by_name=True)

    tag: str = Field(min_length=1)
    id: str | None = None
    class_name: str | None = Field(default=None, alias="className")
    text: str | None = None
    selector: str = ""
    snippet: str = ""

    @field_validator("tag", mode="before")
    @classmethod
    def _lower_tag(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("id", "class_name", "text", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> str | None:
        # SVG elements report className as an object, not a string
        if not isinstance(value, str) or not value.strip():
            return None
        return value


class ToggleInspectorMessage(BaseModel):
    type: Literal["TOGGLE_INSPECTOR"]
    active: bool


class ElementClickedMessage(BaseModel):
    type: Literal["ELEMENT_CLICKED"]
    payload: ElementClickedPayload


InspectorMessage = Annotated[
    Union[ToggleInspectorMessage, ElementClickedMessage],
    Field(discriminator="type"),
]


class SelectedElementContext(BaseModel):
    """Located element, used to enrich the next AI request"""

    tag: str
    selector: str
    line_number: int | None = None
    snippet: str = ""


class LocateMethod(str, Enum):
    ID = "id"
    TEXT = "text"
    TAG = "tag"
    AI = "ai"
    MISS = "miss"


class LocateResult(BaseModel):
    """Outcome of an element lookup; ``method == MISS`` means no line was found"""

    line_number: int | None = None
    method: LocateMethod = LocateMethod.MISS
    element: SelectedElementContext | None = None

    @property
    def found(self) -> bool:
        return self.method != LocateMethod.MISS


class InspectorEvent(BaseModel):
    """A preview message forwarded by the host, with the buffer it refers to"""

    model_config = ConfigDict(protected_namespaces=())

    message: InspectorMessage
    source: str = ""
    model_id: str | None = None
    provider_id: str | None = None
    use_ai: bool = True


class InspectorState(BaseModel):
    active: bool
    selected: SelectedElementContext | None = None
    result: LocateResult | None = None
