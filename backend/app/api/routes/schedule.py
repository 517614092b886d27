"""Schedule (visit) API routes."""
from __future__ import annotations

import datetime as dt
from time import perf_counter
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from app.api.deps import get_schedule_service, get_task_service
from app.api.responses import ok, paginated_ok
from app.api.schemas.common import APIResponse, PaginatedAPIResponse, Pagination
from app.api.schemas.schedule import (
    ScheduleDetailOut,
    ScheduleOut,
    ScheduleStatusUpdateRequest,
    ScheduleSummaryOut,
    VisitLocationRequest,
)
from app.api.schemas.task import TaskOut
from app.observability.metrics import log_metric
from app.observability.tracing import trace
from app.services.schedule_service import ScheduleService
from app.services.task_service import TaskService

router = APIRouter()


@router.get("/schedules", response_model=PaginatedAPIResponse, tags=["schedules"])
def list_schedules(
    request: Request,
    limit: Optional[int] = Query(default=None, description="Page size (1-100, default 10)"),
    page: Optional[int] = Query(default=None, description="Page number (default 1)"),
    date: Optional[dt.date] = Query(default=None, description="Calendar day filter, YYYY-MM-DD"),
    service: ScheduleService = Depends(get_schedule_service),
) -> JSONResponse:
    """List schedules ordered by shift time, optionally restricted to one day."""
    request_id = getattr(request.state, "request_id", None)
    start = perf_counter()
    day = date.isoformat() if date else None
    filters = {"page": page, "limit": limit, "date": date}
    with trace(
        "schedule.list",
        metadata={"route": "/schedules", "page": page, "limit": limit, "date": day},
        request_id=request_id,
    ):
        result = service.list_schedules(filters)

    log_metric("schedule.list.count", len(result.data), metadata={"date": day})
    log_metric("schedule.list.latency_ms", (perf_counter() - start) * 1000)
    pagination = Pagination(
        page=result.page,
        page_size=result.page_size,
        total_items=result.total_items,
        total_pages=result.total_pages,
    )
    data = [ScheduleOut.model_validate(row) for row in result.data]
    return paginated_ok(data, pagination, "Schedules retrieved successfully")


@router.get("/schedules/summary", response_model=APIResponse, tags=["schedules"])
def summarize_schedules(
    request: Request,
    date: Optional[dt.date] = Query(default=None, description="Calendar day filter, YYYY-MM-DD"),
    service: ScheduleService = Depends(get_schedule_service),
) -> JSONResponse:
    """Count schedules per status."""
    request_id = getattr(request.state, "request_id", None)
    with trace("schedule.summary", metadata={"date": date.isoformat() if date else None}, request_id=request_id):
        summary = service.summarize(date)

    payload = ScheduleSummaryOut(
        date=summary.day.isoformat() if summary.day else None,
        total=summary.total,
        by_status=summary.by_status,
    )
    return ok(payload, "Schedule summary retrieved successfully")


@router.get("/schedules/{schedule_id}", response_model=APIResponse, tags=["schedules"])
def get_schedule_detail(
    schedule_id: str,
    request: Request,
    service: ScheduleService = Depends(get_schedule_service),
) -> JSONResponse:
    """Return a schedule with its care tasks."""
    request_id = getattr(request.state, "request_id", None)
    with trace("schedule.get", metadata={"schedule_id": schedule_id}, request_id=request_id):
        schedule = service.get_schedule_detail(schedule_id)

    log_metric("schedule.get.tasks", len(schedule.tasks), metadata={"schedule_id": schedule_id})
    return ok(ScheduleDetailOut.model_validate(schedule), "Schedule details retrieved successfully")


@router.get("/schedules/{schedule_id}/tasks", response_model=APIResponse, tags=["schedules"])
def list_schedule_tasks(
    schedule_id: str,
    request: Request,
    service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    with trace("task.list", metadata={"schedule_id": schedule_id}, request_id=request_id):
        tasks = service.list_tasks_by_schedule(schedule_id)
    return ok([TaskOut.model_validate(task) for task in tasks], "Tasks retrieved successfully")


@router.post("/schedules/{schedule_id}/start", response_model=APIResponse, tags=["schedules"])
def start_visit(
    schedule_id: str,
    payload: VisitLocationRequest,
    request: Request,
    service: ScheduleService = Depends(get_schedule_service),
) -> JSONResponse:
    """Check in: record start time and location, move the visit to in-progress."""
    request_id = getattr(request.state, "request_id", None)
    with trace("schedule.start_visit", metadata={"schedule_id": schedule_id}, request_id=request_id):
        service.start_visit(schedule_id, payload.latitude, payload.longitude)

    log_metric("schedule.start_visit.success", 1, metadata={"schedule_id": schedule_id})
    return ok(message="Visit started successfully")


@router.post("/schedules/{schedule_id}/end", response_model=APIResponse, tags=["schedules"])
def end_visit(
    schedule_id: str,
    payload: VisitLocationRequest,
    request: Request,
    service: ScheduleService = Depends(get_schedule_service),
) -> JSONResponse:
    """Check out: record end time and location, move the visit to completed."""
    request_id = getattr(request.state, "request_id", None)
    with trace("schedule.end_visit", metadata={"schedule_id": schedule_id}, request_id=request_id):
        service.end_visit(schedule_id, payload.latitude, payload.longitude)

    log_metric("schedule.end_visit.success", 1, metadata={"schedule_id": schedule_id})
    return ok(message="Visit ended successfully")


@router.patch("/schedules/{schedule_id}/status", response_model=APIResponse, tags=["schedules"])
def update_schedule_status(
    schedule_id: str,
    payload: ScheduleStatusUpdateRequest,
    request: Request,
    service: ScheduleService = Depends(get_schedule_service),
) -> JSONResponse:
    """Administrative status override; skips transition checks."""
    request_id = getattr(request.state, "request_id", None)
    metadata = {"schedule_id": schedule_id, "status": payload.status}
    with trace("schedule.set_status", metadata=metadata, request_id=request_id):
        service.set_status(schedule_id, payload.status)

    log_metric("schedule.set_status.success", 1, metadata=metadata)
    return ok(message="Schedule status updated successfully")
