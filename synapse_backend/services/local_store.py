"""
Local Store - JSON key-value persistence for settings and chat transcripts
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "SYNAPSE_CONFIG_DIR"


def resolve_store_path(filename: str = "store.json") -> Path:
    """Pick the store file: $SYNAPSE_CONFIG_DIR, then ~/.synapse, then the temp dir"""
    candidates = []
    if os.environ.get(CONFIG_DIR_ENV):
        candidates.append(Path(os.environ[CONFIG_DIR_ENV]))
    candidates.append(Path(os.path.expanduser("~/.synapse")))

    for config_dir in candidates:
        try:
            config_dir.mkdir(parents=True, exist_ok=True)
            return config_dir / filename
        except OSError as e:
            logger.warning("Cannot write to %s: %s", config_dir, e)

    tmp_dir = Path(tempfile.gettempdir()) / "synapse"
    tmp_dir.mkdir(parents=True, exist_ok=True)
    logger.warning("Using temporary store path: %s", tmp_dir / filename)
    return tmp_dir / filename


class LocalStore:
    """A flat JSON object on disk, read fresh on every access"""

    def __init__(self, path: Path | None = None):
        self.path = path or resolve_store_path()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Error loading store %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise RuntimeError(f"Failed to save {key}: {e}") from e

    def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
