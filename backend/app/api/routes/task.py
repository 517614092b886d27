"""Task API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.api.deps import get_task_service
from app.api.responses import ok
from app.api.schemas.common import APIResponse
from app.api.schemas.task import TaskStatusUpdateRequest
from app.observability.metrics import log_metric
from app.observability.tracing import trace
from app.services.task_service import TaskService

router = APIRouter()


@router.post("/tasks/{task_id}/update", response_model=APIResponse, tags=["tasks"])
def update_task_status(
    task_id: str,
    payload: TaskStatusUpdateRequest,
    http_request: Request,
    service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    """Update a care task's status, with a reason when it was not completed."""
    request_id = getattr(http_request.state, "request_id", None)
    metadata = {"route": "/tasks/{task_id}/update", "task_id": task_id, "status": payload.status}

    with trace("task.update_status", metadata=metadata, request_id=request_id):
        service.update_task_status(task_id, payload.status, payload.reason)

    log_metric("task.update_status.success", 1, metadata={"status": payload.status})
    return ok(message="Task status updated successfully")
