"""ORM models exposed for metadata discovery."""
from app.db.models.schedule import Schedule
from app.db.models.task import Task

__all__ = [
    "Schedule",
    "Task",
]
