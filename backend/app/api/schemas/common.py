"""Response envelope schemas shared by all routes."""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class Pagination(BaseModel):
    page: int
    page_size: int
    total_items: int
    total_pages: int


class ErrorDetail(BaseModel):
    code: int
    message: str
    details: Optional[str] = None


class APIResponse(BaseModel):
    success: bool
    message: str
    data: Optional[Any] = None
    error: Optional[Any] = None


class PaginatedAPIResponse(APIResponse):
    pagination: Optional[Pagination] = None
