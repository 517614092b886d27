"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import register_exception_handlers
from app.api.middleware import RequestContextMiddleware
from app.api.routes import schedule, task
from app.core.config import settings
from app.core.logging import configure_logging
from app.observability.client import init_opik, shutdown_opik

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging(log_level=settings.log_level)
    init_opik()
    logger.info("Starting %s", settings.app_name)
    try:
        yield
    finally:
        shutdown_opik()
        logger.info("Stopped %s", settings.app_name)


def create_app() -> FastAPI:
    application = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization", "X-Request-ID"],
    )
    application.add_middleware(RequestContextMiddleware)
    register_exception_handlers(application)

    @application.get("/", tags=["meta"])
    def root() -> dict:
        return {
            "message": "Welcome to EVV Logger API!",
            "time": datetime.now(timezone.utc).isoformat(),
        }

    @application.get("/health", tags=["meta"])
    def health_check() -> dict:
        return {"status": "ok"}

    application.include_router(schedule.router, prefix="/api")
    application.include_router(task.router, prefix="/api")
    return application


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual launch
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())
