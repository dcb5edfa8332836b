"""User settings schema"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class EditorSettings(BaseModel):
    tab_size: int = 2
    font_size: int = 14
    auto_save: Literal["off", "onFocusChange", "afterDelay"] = "off"


class AISettings(BaseModel):
    default_provider: str = "gemini"
    default_model: str = "gemini-2.0-flash-exp"
    quick_edit_model: str | None = "gemini-2.0-flash-exp"
    chat_model: str | None = "gpt-4o-mini"
    agent_model: str | None = "claude-3-5-sonnet-20241022"
    temperature: float = 0.2
    max_tokens: int = 2048
    request_timeout: float | None = 120.0


class ProviderCredentials(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    api_key: str = ""
    base_url: str | None = None


def _default_providers() -> dict[str, ProviderCredentials]:
    return {
        "openai": ProviderCredentials(),
        "anthropic": ProviderCredentials(),
        "gemini": ProviderCredentials(),
    }


class Settings(BaseModel):
    """Persisted user settings; every field has a default so old data loads"""

    theme: Literal["light", "dark", "system"] = "dark"
    editor: EditorSettings = EditorSettings()
    ai: AISettings = AISettings()
    providers: dict[str, ProviderCredentials] = {}

    def model_post_init(self, __context) -> None:
        for provider_id, creds in _default_providers().items():
            self.providers.setdefault(provider_id, creds)


class SettingsUpdate(BaseModel):
    """Partial settings update; nested sections merge one level deep"""

    theme: Literal["light", "dark", "system"] | None = None
    editor: dict | None = None
    ai: dict | None = None
    providers: dict[str, dict] | None = None
