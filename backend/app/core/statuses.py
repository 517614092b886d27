"""Lifecycle status values for schedules and tasks."""
from __future__ import annotations

from enum import Enum
from typing import Literal


class ScheduleStatus(str, Enum):
    UPCOMING = "upcoming"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    MISSED = "missed"
    CANCELLED = "cancelled"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    NOT_COMPLETED = "not_completed"
    CANCELLED = "cancelled"


ScheduleStatusValue = Literal["upcoming", "in-progress", "completed", "missed", "cancelled"]
TaskStatusValue = Literal["pending", "in-progress", "completed", "not_completed", "cancelled"]

SCHEDULE_STATUS_VALUES = tuple(item.value for item in ScheduleStatus)
TASK_STATUS_VALUES = tuple(item.value for item in TaskStatus)

# Statuses that require a free-text explanation on the task.
TASK_STATUSES_REQUIRING_REASON = frozenset({TaskStatus.NOT_COMPLETED.value})
