"""Schemas for schedule endpoints."""
from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.api.schemas.task import TaskOut
from app.core.statuses import ScheduleStatusValue

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
# Largest row offset that fits the signed 64-bit OFFSET parameter.
MAX_OFFSET = 2**63 - 1


class ScheduleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    client_name: str
    shift_time: dt.datetime
    location: str
    status: str
    start_time: Optional[dt.datetime] = None
    start_latitude: Optional[float] = None
    start_longitude: Optional[float] = None
    end_time: Optional[dt.datetime] = None
    end_latitude: Optional[float] = None
    end_longitude: Optional[float] = None
    created_at: dt.datetime
    updated_at: dt.datetime


class ScheduleDetailOut(ScheduleOut):
    tasks: List[TaskOut] = Field(default_factory=list)


class ScheduleFilter(BaseModel):
    """Listing filter. Missing or sub-1 page and limit fall back to the defaults."""

    page: int = DEFAULT_PAGE
    limit: int = Field(default=DEFAULT_PAGE_SIZE, le=MAX_PAGE_SIZE)
    date: Optional[dt.date] = None

    @model_validator(mode="before")
    @classmethod
    def apply_page_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned = {key: value for key, value in data.items() if value is not None and value != ""}
        for key, default in (("page", DEFAULT_PAGE), ("limit", DEFAULT_PAGE_SIZE)):
            if key not in cleaned:
                continue
            try:
                number = int(cleaned[key])
            except (TypeError, ValueError):
                continue  # reported by field validation
            if number < 1:
                cleaned[key] = default
        return cleaned

    @model_validator(mode="after")
    def check_offset(self) -> "ScheduleFilter":
        if self.offset > MAX_OFFSET:
            raise ValueError(f"page {self.page} is out of range for limit {self.limit}")
        return self

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class VisitLocationRequest(BaseModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class ScheduleStatusUpdateRequest(BaseModel):
    status: ScheduleStatusValue


class ScheduleSummaryOut(BaseModel):
    date: Optional[str] = None
    total: int
    by_status: Dict[str, int]
