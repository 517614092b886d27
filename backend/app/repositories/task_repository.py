"""Task persistence gateway."""
from __future__ import annotations

import logging
from typing import List, Optional, Protocol
from uuid import UUID

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.db.models.task import Task
from app.repositories.base import translate_storage_error


class TaskRepository(Protocol):
    def list_by_schedule(self, schedule_id: UUID) -> List[Task]:
        ...

    def get(self, task_id: UUID) -> Task:
        ...

    def update_status(
        self,
        task_id: UUID,
        status: str,
        reason: Optional[str],
        *,
        expected_status: Optional[str] = None,
    ) -> bool:
        ...


class SqlAlchemyTaskRepository:
    """TaskRepository backed by a SQLAlchemy session."""

    def __init__(self, db: Session, logger: Optional[logging.Logger] = None) -> None:
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def list_by_schedule(self, schedule_id: UUID) -> List[Task]:
        try:
            return (
                self.db.query(Task)
                .filter(Task.schedule_id == schedule_id)
                .order_by(Task.created_at.asc())
                .all()
            )
        except SQLAlchemyError as exc:
            raise translate_storage_error(
                exc, operation="list_tasks_by_schedule", logger=self.logger, schedule_id=schedule_id
            ) from exc

    def get(self, task_id: UUID) -> Task:
        try:
            task = self.db.get(Task, task_id)
        except SQLAlchemyError as exc:
            raise translate_storage_error(exc, operation="get_task", logger=self.logger, task_id=task_id) from exc
        if task is None:
            self.logger.warning("Task not found in database task_id=%s", task_id)
            raise NotFoundError(f"Task with ID {task_id} not found")
        return task

    def update_status(
        self,
        task_id: UUID,
        status: str,
        reason: Optional[str],
        *,
        expected_status: Optional[str] = None,
    ) -> bool:
        """Overwrite status and reason; with ``expected_status`` only if unchanged since read."""
        stmt = update(Task).where(Task.id == task_id)
        if expected_status is not None:
            stmt = stmt.where(Task.status == expected_status)
        stmt = stmt.values(status=status, reason=reason, updated_at=func.now()).execution_options(
            synchronize_session=False
        )
        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise translate_storage_error(
                exc, operation="update_task_status", logger=self.logger, task_id=task_id, status=status
            ) from exc
        return result.rowcount > 0
