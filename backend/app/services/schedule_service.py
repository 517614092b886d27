"""Schedule lifecycle: listing, detail composition and visit check-in/out."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Union
from uuid import UUID

from app.api.schemas.schedule import ScheduleFilter, ScheduleStatusUpdateRequest
from app.core.errors import ConflictError, InvalidArgumentError, ServiceError
from app.core.statuses import SCHEDULE_STATUS_VALUES, ScheduleStatus
from app.repositories.schedule_repository import ScheduleRepository
from app.repositories.task_repository import TaskRepository
from app.services.validation import parse_uuid, validate_payload

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PaginatedSchedules:
    data: List[Any]
    page: int
    page_size: int
    total_items: int
    total_pages: int


@dataclass
class ScheduleSummary:
    total: int
    by_status: Dict[str, int] = field(default_factory=dict)
    day: Optional[date] = None


def compute_total_pages(total_items: int, page_size: int) -> int:
    """Ceiling of total/page_size; zero when there is nothing to page through."""
    if total_items <= 0:
        return 0
    return (total_items + page_size - 1) // page_size


def normalize_filter(filters: Union[ScheduleFilter, Mapping[str, Any]]) -> ScheduleFilter:
    """Validate raw listing input: clamp page/limit, bound limit and offset, parse the day."""
    return validate_payload(ScheduleFilter, filters)


class ScheduleService:
    """Applies visit lifecycle rules on top of the schedule and task repositories."""

    def __init__(
        self,
        schedules: ScheduleRepository,
        tasks: TaskRepository,
        *,
        logger: Optional[logging.Logger] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.schedules = schedules
        self.tasks = tasks
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock or _utc_now

    def list_schedules(self, filters: Union[ScheduleFilter, Mapping[str, Any]]) -> PaginatedSchedules:
        self.logger.info("Fetching schedules filters=%s", filters)
        try:
            request = normalize_filter(filters)
        except InvalidArgumentError as exc:
            self.logger.error("Validation failed for schedule filter: %s", exc.details)
            raise

        rows, total = self.schedules.list(offset=request.offset, limit=request.limit, day=request.date)
        return PaginatedSchedules(
            data=list(rows),
            page=request.page,
            page_size=request.limit,
            total_items=total,
            total_pages=compute_total_pages(total, request.limit),
        )

    def get_schedule_detail(self, schedule_id: str):
        """Return the schedule with its tasks attached as ``schedule.tasks``.

        A failure while loading tasks is logged and yields an empty task list
        rather than failing the lookup.
        """
        self.logger.info("Fetching schedule by ID schedule_id=%s", schedule_id)
        key = parse_uuid(schedule_id, label="schedule")
        schedule = self.schedules.get(key)

        try:
            tasks = self.tasks.list_by_schedule(key)
        except ServiceError:
            self.logger.error("Failed to fetch tasks for schedule schedule_id=%s", schedule_id, exc_info=True)
            tasks = []
        setattr(schedule, "tasks", list(tasks))
        return schedule

    def start_visit(self, schedule_id: str, latitude: Optional[float], longitude: Optional[float]) -> None:
        self.logger.info(
            "Attempting to start visit schedule_id=%s latitude=%s longitude=%s", schedule_id, latitude, longitude
        )
        key = self._validate_visit_request(schedule_id, latitude, longitude)
        schedule = self.schedules.get(key)
        if schedule.status != ScheduleStatus.UPCOMING.value:
            raise ConflictError(f"Visit for schedule ID {schedule_id} is already {schedule.status}. Cannot start.")

        updated = self.schedules.log_visit_start(
            key,
            started_at=self.clock(),
            latitude=latitude,
            longitude=longitude,
            expected_status=ScheduleStatus.UPCOMING.value,
        )
        if not updated:
            self._raise_lost_race(key, schedule_id, action="start")
        self.logger.info("Visit started schedule_id=%s", schedule_id)

    def end_visit(self, schedule_id: str, latitude: Optional[float], longitude: Optional[float]) -> None:
        self.logger.info(
            "Attempting to end visit schedule_id=%s latitude=%s longitude=%s", schedule_id, latitude, longitude
        )
        key = self._validate_visit_request(schedule_id, latitude, longitude)
        schedule = self.schedules.get(key)
        if schedule.status != ScheduleStatus.IN_PROGRESS.value:
            raise ConflictError(f"Visit for schedule ID {schedule_id} is currently {schedule.status}. Cannot end.")

        updated = self.schedules.log_visit_end(
            key,
            ended_at=self.clock(),
            latitude=latitude,
            longitude=longitude,
            expected_status=ScheduleStatus.IN_PROGRESS.value,
        )
        if not updated:
            self._raise_lost_race(key, schedule_id, action="end")
        self.logger.info("Visit ended schedule_id=%s", schedule_id)

    def set_status(self, schedule_id: str, status: str) -> None:
        """Administrative override: overwrite status without transition checks."""
        self.logger.info("Attempting to update schedule status schedule_id=%s status=%s", schedule_id, status)
        key = parse_uuid(schedule_id, label="schedule")
        update = validate_payload(ScheduleStatusUpdateRequest, {"status": status})

        self.schedules.get(key)
        self.schedules.update_status(key, update.status)

    def summarize(self, day: Union[str, date, None] = None) -> ScheduleSummary:
        parsed = normalize_filter({"date": day}).date
        counts = self.schedules.count_by_status(day=parsed)
        by_status = {value: 0 for value in SCHEDULE_STATUS_VALUES}
        for status, count in counts.items():
            by_status[status] = by_status.get(status, 0) + count
        return ScheduleSummary(total=sum(by_status.values()), by_status=by_status, day=parsed)

    def _validate_visit_request(self, schedule_id: str, latitude: Optional[float], longitude: Optional[float]) -> UUID:
        key = parse_uuid(schedule_id, label="schedule")
        missing = [name for name, value in (("latitude", latitude), ("longitude", longitude)) if value is None]
        if missing:
            self.logger.error("Validation failed for visit request schedule_id=%s missing=%s", schedule_id, missing)
            raise InvalidArgumentError(f"Missing required field(s): {', '.join(missing)}")
        return key

    def _raise_lost_race(self, key: UUID, schedule_id: str, *, action: str) -> None:
        current = self.schedules.get(key)
        self.logger.warning(
            "Schedule changed before visit %s could be recorded schedule_id=%s status=%s",
            action,
            schedule_id,
            current.status,
        )
        raise ConflictError(f"Visit for schedule ID {schedule_id} is currently {current.status}. Cannot {action}.")
