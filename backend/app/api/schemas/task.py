"""Schemas for task endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, model_serializer, model_validator

from app.core.statuses import TASK_STATUSES_REQUIRING_REASON, TaskStatusValue


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    schedule_id: UUID
    description: str
    status: str
    reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @model_serializer(mode="wrap")
    def _omit_missing_reason(self, handler) -> Dict[str, Any]:
        data = handler(self)
        if data.get("reason") is None:
            data.pop("reason", None)
        return data


class TaskStatusUpdateRequest(BaseModel):
    status: TaskStatusValue
    reason: Optional[str] = None

    @model_validator(mode="after")
    def check_reason(self) -> "TaskStatusUpdateRequest":
        """Require a non-blank reason where the status needs one; store blank as None."""
        cleaned = self.reason.strip() if self.reason else ""
        if self.status in TASK_STATUSES_REQUIRING_REASON and not cleaned:
            raise ValueError(f"reason is required when status is {self.status}")
        if not cleaned:
            self.reason = None
        return self
