"""Exception handlers that render failures as error envelopes."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.responses import error
from app.api.schemas.common import ErrorDetail
from app.core.errors import ServiceError
from app.services.validation import describe_validation_errors

logger = logging.getLogger(__name__)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.code >= 500:
        logger.error("Request %s %s failed: %s", request.method, request.url.path, exc)
    return error(exc.code, exc.message, exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    in_body = any(item.get("loc", ("",))[0] == "body" for item in exc.errors())
    message = "Invalid request body" if in_body else "Invalid query parameters"
    detail = ErrorDetail(
        code=status.HTTP_400_BAD_REQUEST, message=message, details=describe_validation_errors(exc.errors())
    )
    return error(status.HTTP_400_BAD_REQUEST, message, detail.model_dump(exclude_none=True))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = ErrorDetail(code=exc.status_code, message=str(exc.detail))
    return error(exc.status_code, str(exc.detail), detail.model_dump(exclude_none=True))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    detail = ErrorDetail(code=status.HTTP_500_INTERNAL_SERVER_ERROR, message="Internal server error")
    return error(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred", detail.model_dump(exclude_none=True)
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
