"""Shared router dependencies"""

from __future__ import annotations

from fastapi import Request

from ..services.container import AppServices


def get_services(request: Request) -> AppServices:
    """The composition root created in the application lifespan"""
    return request.app.state.services
