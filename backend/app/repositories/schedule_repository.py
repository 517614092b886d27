"""Schedule persistence gateway."""
from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from typing import Dict, List, Optional, Protocol, Tuple
from uuid import UUID

from sqlalchemy import and_, func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.core.statuses import ScheduleStatus
from app.db.models.schedule import Schedule
from app.repositories.base import translate_storage_error


class ScheduleRepository(Protocol):
    def list(self, *, offset: int, limit: int, day: Optional[date] = None) -> Tuple[List[Schedule], int]:
        ...

    def count_by_status(self, *, day: Optional[date] = None) -> Dict[str, int]:
        ...

    def get(self, schedule_id: UUID) -> Schedule:
        ...

    def update_status(self, schedule_id: UUID, status: str) -> None:
        ...

    def log_visit_start(
        self,
        schedule_id: UUID,
        *,
        started_at: datetime,
        latitude: float,
        longitude: float,
        expected_status: str,
    ) -> bool:
        ...

    def log_visit_end(
        self,
        schedule_id: UUID,
        *,
        ended_at: datetime,
        latitude: float,
        longitude: float,
        expected_status: str,
    ) -> bool:
        ...


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """Inclusive UTC start and end of a calendar day."""
    return (
        datetime.combine(day, time.min, tzinfo=timezone.utc),
        datetime.combine(day, time.max, tzinfo=timezone.utc),
    )


class SqlAlchemyScheduleRepository:
    """ScheduleRepository backed by a SQLAlchemy session."""

    def __init__(self, db: Session, logger: Optional[logging.Logger] = None) -> None:
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def _day_filter(self, day: Optional[date]):
        if day is None:
            return None
        start, end = day_bounds(day)
        return and_(Schedule.shift_time >= start, Schedule.shift_time <= end)

    def list(self, *, offset: int, limit: int, day: Optional[date] = None) -> Tuple[List[Schedule], int]:
        day_filter = self._day_filter(day)
        try:
            count_query = self.db.query(func.count(Schedule.id))
            page_query = self.db.query(Schedule)
            if day_filter is not None:
                count_query = count_query.filter(day_filter)
                page_query = page_query.filter(day_filter)

            total = count_query.scalar() or 0
            rows = page_query.order_by(Schedule.shift_time.asc()).offset(offset).limit(limit).all()
        except SQLAlchemyError as exc:
            raise translate_storage_error(
                exc, operation="list_schedules", logger=self.logger, offset=offset, limit=limit, day=day
            ) from exc
        return rows, int(total)

    def count_by_status(self, *, day: Optional[date] = None) -> Dict[str, int]:
        day_filter = self._day_filter(day)
        try:
            query = self.db.query(Schedule.status, func.count(Schedule.id))
            if day_filter is not None:
                query = query.filter(day_filter)
            rows = query.group_by(Schedule.status).all()
        except SQLAlchemyError as exc:
            raise translate_storage_error(exc, operation="count_schedules_by_status", logger=self.logger, day=day) from exc
        return {status: int(count) for status, count in rows}

    def get(self, schedule_id: UUID) -> Schedule:
        try:
            schedule = self.db.get(Schedule, schedule_id)
        except SQLAlchemyError as exc:
            raise translate_storage_error(exc, operation="get_schedule", logger=self.logger, schedule_id=schedule_id) from exc
        if schedule is None:
            self.logger.warning("Schedule not found in database schedule_id=%s", schedule_id)
            raise NotFoundError(f"Schedule with ID {schedule_id} not found")
        return schedule

    def update_status(self, schedule_id: UUID, status: str) -> None:
        self._execute_update(
            "update_schedule_status",
            schedule_id,
            {"status": status},
            expected_status=None,
        )

    def log_visit_start(
        self,
        schedule_id: UUID,
        *,
        started_at: datetime,
        latitude: float,
        longitude: float,
        expected_status: str,
    ) -> bool:
        values = {
            "start_time": started_at,
            "start_latitude": latitude,
            "start_longitude": longitude,
            "status": ScheduleStatus.IN_PROGRESS.value,
        }
        return self._execute_update("log_visit_start", schedule_id, values, expected_status=expected_status)

    def log_visit_end(
        self,
        schedule_id: UUID,
        *,
        ended_at: datetime,
        latitude: float,
        longitude: float,
        expected_status: str,
    ) -> bool:
        values = {
            "end_time": ended_at,
            "end_latitude": latitude,
            "end_longitude": longitude,
            "status": ScheduleStatus.COMPLETED.value,
        }
        return self._execute_update("log_visit_end", schedule_id, values, expected_status=expected_status)

    def _execute_update(self, operation: str, schedule_id: UUID, values: dict, *, expected_status: Optional[str]) -> bool:
        stmt = update(Schedule).where(Schedule.id == schedule_id)
        if expected_status is not None:
            stmt = stmt.where(Schedule.status == expected_status)
        stmt = stmt.values(**values, updated_at=func.now()).execution_options(synchronize_session=False)
        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise translate_storage_error(
                exc, operation=operation, logger=self.logger, schedule_id=schedule_id, status=values.get("status")
            ) from exc
        return result.rowcount > 0
