"""
Settings Store - Load, merge and persist user settings
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from ..models.settings import Settings, SettingsUpdate
from .errors import ConfigurationError
from .local_store import LocalStore

logger = logging.getLogger(__name__)

SETTINGS_KEY = "synapse.settings.v1"


def mask_key(key: str) -> str:
    if not key:
        return ""
    if len(key) <= 8:
        return "*" * len(key)
    return key[:4] + "*" * (len(key) - 8) + key[-4:]


class SettingsStore:
    """Settings persisted under one key of the local store"""

    def __init__(self, store: LocalStore):
        self.store = store

    def load(self) -> Settings:
        raw = self.store.get(SETTINGS_KEY)
        if not isinstance(raw, dict):
            return Settings()
        # Shallow merge; missing nested fields are filled in by validation
        merged = {**Settings().model_dump(), **raw}
        try:
            return Settings.model_validate(merged)
        except ValidationError as e:
            logger.error("Ignoring invalid persisted settings: %s", e)
            return Settings()

    def save(self, settings: Settings) -> None:
        self.store.set(SETTINGS_KEY, settings.model_dump(mode="json"))

    def update(self, partial: SettingsUpdate) -> Settings:
        current = self.load().model_dump(mode="json")
        if partial.theme is not None:
            current["theme"] = partial.theme
        for section in ("editor", "ai"):
            changes = getattr(partial, section)
            if changes:
                current[section] = {**current[section], **changes}
        if partial.providers:
            for provider_id, changes in partial.providers.items():
                current["providers"][provider_id] = {**current["providers"].get(provider_id, {}), **changes}

        try:
            settings = Settings.model_validate(current)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e
        self.save(settings)
        return settings

    def masked(self, settings: Settings | None = None) -> Settings:
        """Copy of the settings safe to send to a client"""
        settings = (settings or self.load()).model_copy(deep=True)
        for creds in settings.providers.values():
            creds.api_key = mask_key(creds.api_key)
        return settings
