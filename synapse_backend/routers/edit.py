"""Quick-edit API endpoints"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..models.edit import ApplyPatchRequest, ApplyPatchResponse, QuickEditRequest, QuickEditResponse
from ..services.container import AppServices
from ..services.patches import apply_patch
from .deps import get_services

router = APIRouter()


@router.post("/quick-edit", response_model=QuickEditResponse)
async def quick_edit(request: QuickEditRequest, services: AppServices = Depends(get_services)) -> QuickEditResponse:
    """Rewrite the selection (or the whole buffer) following the instruction"""
    return await services.quick_edit.run(request)


@router.post("/apply", response_model=ApplyPatchResponse)
async def apply(request: ApplyPatchRequest, services: AppServices = Depends(get_services)) -> ApplyPatchResponse:
    """Apply a patch to the given buffer and optionally save the result"""
    content = apply_patch(request.buffer, request.patch)
    if request.write_path:
        await services.workspace.write_file(request.write_path, content)
    return ApplyPatchResponse(content=content, written=bool(request.write_path))
