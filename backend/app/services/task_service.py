"""Task lifecycle: per-visit care task listing and status updates."""
from __future__ import annotations

import logging
from typing import List, Optional

from app.api.schemas.task import TaskStatusUpdateRequest
from app.core.errors import ConflictError, InvalidArgumentError
from app.core.statuses import TaskStatus
from app.db.models.task import Task
from app.repositories.task_repository import TaskRepository
from app.services.validation import parse_uuid, validate_payload

# (from, to) pairs rejected regardless of input.
FORBIDDEN_TRANSITIONS = frozenset({(TaskStatus.COMPLETED.value, TaskStatus.PENDING.value)})


def validate_task_update(status: str, reason: Optional[str]) -> TaskStatusUpdateRequest:
    """Check the status and reason shape; a blank reason comes back as None."""
    return validate_payload(TaskStatusUpdateRequest, {"status": status, "reason": reason})


class TaskService:
    def __init__(self, tasks: TaskRepository, *, logger: Optional[logging.Logger] = None) -> None:
        self.tasks = tasks
        self.logger = logger or logging.getLogger(__name__)

    def list_tasks_by_schedule(self, schedule_id: str) -> List[Task]:
        self.logger.info("Fetching tasks by schedule ID schedule_id=%s", schedule_id)
        key = parse_uuid(schedule_id, label="schedule")
        return list(self.tasks.list_by_schedule(key))

    def update_task_status(self, task_id: str, status: str, reason: Optional[str] = None) -> None:
        self.logger.info("Attempting to update task status task_id=%s status=%s reason=%s", task_id, status, reason)
        key = parse_uuid(task_id, label="task")
        try:
            update = validate_task_update(status, reason)
        except InvalidArgumentError as exc:
            self.logger.error("Validation failed for task update task_id=%s: %s", task_id, exc.details)
            raise

        task = self.tasks.get(key)
        current = task.status
        if (current, update.status) in FORBIDDEN_TRANSITIONS:
            raise ConflictError(f"Task ID {task_id} is already {current}. Cannot change to {update.status}.")

        updated = self.tasks.update_status(key, update.status, update.reason, expected_status=current)
        if not updated:
            latest = self.tasks.get(key)
            self.logger.warning(
                "Task changed before status update could be recorded task_id=%s status=%s", task_id, latest.status
            )
            raise ConflictError(f"Task ID {task_id} was modified concurrently (now {latest.status}). Retry the update.")
