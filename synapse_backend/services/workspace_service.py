"""
Workspace Service - Project folder access for the editor and the agent
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from ..models.context import ContextItem, ContextItemType
from ..models.workspace import DirectoryEntry
from .errors import PathAccessError

logger = logging.getLogger(__name__)

SKIPPED_DIRECTORIES = {"node_modules", ".git"}


class WorkspaceService:
    """Filesystem operations confined to the open folder.

    Every path is resolved (symlinks included) and must land inside the
    workspace root; failures propagate unless the name says otherwise.
    """

    def __init__(self, root: str | None = None):
        self.root: Path | None = Path(root).resolve() if root else None

    def open_folder(self, path: str) -> Path:
        folder = Path(path).expanduser().resolve()
        if not folder.is_dir():
            raise NotADirectoryError(f"Not a directory: {path}")
        self.root = folder
        logger.info("Opened workspace %s", folder)
        return folder

    def confine(self, path: str) -> Path:
        """Resolve ``path`` against the workspace root and refuse anything outside it"""
        if self.root is None:
            raise FileNotFoundError("No workspace folder is open")
        target = Path(path).expanduser()
        if not target.is_absolute():
            target = self.root / target
        target = target.resolve()
        if not target.is_relative_to(self.root):
            logger.warning("Refused access outside workspace: %s", path)
            raise PathAccessError(f"Path is outside the workspace: {path}")
        return target

    def resolve_root(self, root: str | None = None) -> Path:
        if root:
            return self.confine(root)
        if self.root is None:
            raise FileNotFoundError("No workspace folder is open")
        return self.root

    @staticmethod
    def _read_directory(path: Path) -> list[DirectoryEntry]:
        entries = [
            DirectoryEntry(name=entry.name, is_directory=entry.is_dir(), path=str(entry))
            for entry in path.iterdir()
        ]
        # sorted() is stable: each group keeps the order the OS returned
        return sorted(entries, key=lambda e: not e.is_directory)

    async def read_directory(self, path: str) -> list[DirectoryEntry]:
        """List a directory, directories first; raises when it cannot be read"""
        return await asyncio.to_thread(self._read_directory, self.confine(path))

    async def read_directory_or_empty(self, path: str) -> list[DirectoryEntry]:
        """Same listing, but an unreadable directory yields an empty list"""
        folder = self.confine(path)
        try:
            return await asyncio.to_thread(self._read_directory, folder)
        except OSError as e:
            logger.error("ReadDir error for %s: %s", path, e)
            return []

    async def read_file(self, path: str) -> str:
        return await asyncio.to_thread(self.confine(path).read_text, encoding="utf-8")

    async def write_file(self, path: str, content: str) -> None:
        await asyncio.to_thread(self.confine(path).write_text, content, encoding="utf-8")
        logger.info("Wrote %s (%d chars)", path, len(content))

    async def _walk(self, folder: Path) -> list[str]:
        files: list[str] = []
        for entry in await asyncio.to_thread(self._read_directory, folder):
            path = Path(entry.path)
            if entry.is_directory:
                # symlinked folders can loop back to an ancestor
                if entry.name in SKIPPED_DIRECTORIES or path.is_symlink():
                    continue
                files.extend(await self._walk(path))
            else:
                files.append(entry.path)
        return files

    async def list_files(self, root: str | None = None) -> list[str]:
        """All file paths under ``root``, skipping dependency, VCS and symlinked folders"""
        return await self._walk(self.resolve_root(root))

    async def search(self, query: str, root: str | None = None, limit: int = 5) -> list[ContextItem]:
        """Files whose content contains ``query`` (case-insensitive), at most ``limit``"""
        needle = query.lower()
        results: list[ContextItem] = []
        for path in await self.list_files(root):
            if len(results) >= limit:
                break
            try:
                content = await self.read_file(path)
            except (OSError, UnicodeDecodeError):
                # binary, unreadable or out-of-workspace files are not searchable
                continue
            if needle in content.lower():
                results.append(ContextItem(type=ContextItemType.FILE, path=path, content=content))
        return results
