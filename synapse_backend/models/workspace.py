"""Workspace (filesystem) data models"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DirectoryEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    is_directory: bool = Field(alias="isDirectory")
    path: str


class OpenFolderRequest(BaseModel):
    path: str


class OpenFolderResponse(BaseModel):
    root: str


class ReadFileResponse(BaseModel):
    path: str
    content: str


class WriteFileRequest(BaseModel):
    path: str
    content: str


class SearchResponse(BaseModel):
    query: str
    paths: list[str]
