"""Learning-resource Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .common import CamelModel


class ResourceCreate(CamelModel):
    title: str = Field(..., max_length=200)
    description: str | None = None
    file_url: str = Field(..., description="URL returned by the upload service")
    file_name: str = Field(..., max_length=255)
    file_size: int = Field(0, ge=0)
    is_public: bool = True


class ResourceOut(CamelModel):
    id: int
    owner_id: int
    title: str
    description: str | None = None
    file_url: str
    file_name: str
    file_size: int
    is_public: bool
    download_count: int
    created_at: datetime


class AdminResourceOut(ResourceOut):
    is_deleted: bool
    deleted_at: datetime | None = None


class DownloadOut(CamelModel):
    file_url: str
    file_name: str
    download_count: int
