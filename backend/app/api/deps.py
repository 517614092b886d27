"""Service wiring for route handlers."""
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from app.db.deps import get_db
from app.repositories.schedule_repository import SqlAlchemyScheduleRepository
from app.repositories.task_repository import SqlAlchemyTaskRepository
from app.services.schedule_service import ScheduleService
from app.services.task_service import TaskService


def get_schedule_service(db: Session = Depends(get_db)) -> ScheduleService:
    return ScheduleService(SqlAlchemyScheduleRepository(db), SqlAlchemyTaskRepository(db))


def get_task_service(db: Session = Depends(get_db)) -> TaskService:
    return TaskService(SqlAlchemyTaskRepository(db))
