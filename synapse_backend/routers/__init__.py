"""Routers module - FastAPI route handlers"""

from . import agent, chat, config, edit, inspector, workspace

__all__ = ["agent", "chat", "config", "edit", "inspector", "workspace"]
