"""Workspace (filesystem) API endpoints"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..models.workspace import (
    DirectoryEntry,
    OpenFolderRequest,
    OpenFolderResponse,
    ReadFileResponse,
    SearchResponse,
    WriteFileRequest,
)
from ..services.container import AppServices
from .deps import get_services

router = APIRouter()


@router.post("/open", response_model=OpenFolderResponse)
async def open_folder(request: OpenFolderRequest, services: AppServices = Depends(get_services)) -> OpenFolderResponse:
    """Use the folder chosen in the host's directory dialog as the workspace"""
    root = services.workspace.open_folder(request.path)
    return OpenFolderResponse(root=str(root))


@router.get("/directory", response_model=list[DirectoryEntry])
async def read_directory(
    path: str,
    lenient: bool = False,
    services: AppServices = Depends(get_services),
) -> list[DirectoryEntry]:
    """Directory listing; ``lenient`` turns read errors into an empty list"""
    if lenient:
        return await services.workspace.read_directory_or_empty(path)
    return await services.workspace.read_directory(path)


@router.get("/file", response_model=ReadFileResponse)
async def read_file(path: str, services: AppServices = Depends(get_services)) -> ReadFileResponse:
    return ReadFileResponse(path=path, content=await services.workspace.read_file(path))


@router.put("/file")
async def write_file(request: WriteFileRequest, services: AppServices = Depends(get_services)) -> dict:
    await services.workspace.write_file(request.path, request.content)
    return {"status": "success", "path": request.path}


@router.get("/files", response_model=list[str])
async def list_files(root: str | None = None, services: AppServices = Depends(get_services)) -> list[str]:
    return await services.workspace.list_files(root)


@router.get("/search", response_model=SearchResponse)
async def search(query: str, root: str | None = None, services: AppServices = Depends(get_services)) -> SearchResponse:
    items = await services.workspace.search(query, root)
    return SearchResponse(query=query, paths=[item.path for item in items])
