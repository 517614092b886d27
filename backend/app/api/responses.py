"""Builders for the JSON response envelope."""
from __future__ import annotations

from typing import Any, Optional

from fastapi import status as http_status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.api.schemas.common import Pagination


def _envelope(success: bool, message: str, *, data: Any = None, error: Any = None, **extra: Any) -> dict:
    body: dict = {"success": success, "message": message}
    if data is not None:
        body["data"] = jsonable_encoder(data)
    if error is not None:
        body["error"] = jsonable_encoder(error)
    body.update({key: jsonable_encoder(value) for key, value in extra.items() if value is not None})
    return body


def ok(data: Any = None, message: str = "") -> JSONResponse:
    return JSONResponse(
        status_code=http_status.HTTP_200_OK,
        content=_envelope(True, message or "Operation successful", data=data),
    )


def paginated_ok(data: Any, pagination: Pagination, message: str = "") -> JSONResponse:
    return JSONResponse(
        status_code=http_status.HTTP_200_OK,
        content=_envelope(True, message or "Operation successful", data=data, pagination=pagination),
    )


def error(status_code: int, message: str, err: Optional[Any] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=_envelope(False, message, error=err))
