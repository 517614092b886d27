"""Persistence gateways for schedules and tasks."""
from app.repositories.schedule_repository import ScheduleRepository, SqlAlchemyScheduleRepository
from app.repositories.task_repository import SqlAlchemyTaskRepository, TaskRepository

__all__ = [
    "ScheduleRepository",
    "SqlAlchemyScheduleRepository",
    "SqlAlchemyTaskRepository",
    "TaskRepository",
]
